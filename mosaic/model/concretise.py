"""
Resolution of lazy (thunked) type descriptors to concrete nodes.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from ..errors import TypeDefinitionError
from .nodes import BaseType, OptionalType, ReferenceType, Type

logger = logging.getLogger(__name__)

# Thunk -> concrete node. Entries live as long as the process: descriptors are
# long-lived graphs built once, and recursive graphs keep their thunks alive anyway.
_resolved: dict[Callable[[], Type], BaseType] = {}
_lock = threading.RLock()


def concretise(type_: Type) -> BaseType:
    """
    Follow thunks until a concrete node is reached.

    Each thunk is called at most once: its result is cached by the thunk's
    identity, so repeated resolution of a recursive descriptor returns the
    very same node and never re-expands the graph.

    Raises:
        TypeDefinitionError: if `type_` is neither a node nor a thunk, or if a
            thunk resolves back to itself without reaching a node
    """
    if isinstance(type_, BaseType):
        return type_
    if not callable(type_):
        raise TypeDefinitionError(f"Not a type descriptor: {type_!r}")
    cached = _resolved.get(type_)
    if cached is not None:
        return cached

    with _lock:
        chain: list[Callable[[], Type]] = []
        current = type_
        while not isinstance(current, BaseType):
            cached = _resolved.get(current)
            if cached is not None:
                current = cached
                break
            if not callable(current):
                raise TypeDefinitionError(f"Not a type descriptor: {current!r}")
            if any(thunk is current for thunk in chain):
                raise TypeDefinitionError(
                    "A lazy type resolves to itself without reaching a concrete type"
                )
            chain.append(current)
            current = current()
        for thunk in chain:
            _resolved[thunk] = current
        logger.debug("Resolved lazy type %r to %s node", type_, current.kind.name)
        return current


def unwrap_references(type_: Type) -> BaseType:
    node = concretise(type_)
    while isinstance(node, ReferenceType):
        node = concretise(node.wrapped_type)
    return node


def is_optional(type_: Type) -> bool:
    return isinstance(unwrap_references(type_), OptionalType)
