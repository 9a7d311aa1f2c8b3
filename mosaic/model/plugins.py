"""
The custom type plugin contract.

A plugin supplies the four operations of a scalar type that is not part of
the closed node set (dates, UUIDs, records, ...). Any object with conformant
`encode`, `decode`, `validate` and `arbitrary` methods satisfies the
protocol; no inheritance is required.

Example::

    class Even:
        def encode(self, value, encode_options, options):
            return value

        def decode(self, raw, decode_options, options):
            if isinstance(raw, int) and raw % 2 == 0:
                return decoding_succeed(raw)
            return decoding_fail("an even integer", raw)

        def validate(self, value, validate_options, options):
            return validation_succeed()

        def arbitrary(self, max_depth, options):
            return st.integers().map(lambda n: n * 2)

    even = custom("even", Even())
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Protocol, runtime_checkable

from ..errors import fail_with_internal_error

if TYPE_CHECKING:
    from hypothesis.strategies import SearchStrategy

    from ..errors import DecodingResult, ValidationResult
    from ..options import DecodeOptions, EncodeOptions, ValidateOptions
    from .nodes import JSONValue

logger = logging.getLogger(__name__)


@runtime_checkable
class CustomTypePlugin(Protocol):
    """
    Structural protocol for custom types.

    - encode: typed value -> JSON-safe value
    - decode: raw value -> Result of the typed value or decoding errors
    - validate: typed value -> Result of True or validation errors
    - arbitrary: hypothesis strategy producing valid typed values
    """

    def encode(
        self, value: Any, encode_options: EncodeOptions, options: Mapping[str, Any]
    ) -> JSONValue: ...

    def decode(
        self, raw: Any, decode_options: DecodeOptions, options: Mapping[str, Any]
    ) -> DecodingResult: ...

    def validate(
        self, value: Any, validate_options: ValidateOptions, options: Mapping[str, Any]
    ) -> ValidationResult: ...

    def arbitrary(self, max_depth: int, options: Mapping[str, Any]) -> SearchStrategy[Any]: ...


@dataclass(frozen=True, slots=True)
class FunctionPlugin:
    """A plugin assembled from four plain functions."""

    encoder: Callable[[Any, EncodeOptions, Mapping[str, Any]], JSONValue]
    decoder: Callable[[Any, DecodeOptions, Mapping[str, Any]], DecodingResult]
    validator: Callable[[Any, ValidateOptions, Mapping[str, Any]], ValidationResult]
    generator: Callable[[int, Mapping[str, Any]], SearchStrategy[Any]]

    def encode(self, value, encode_options, options):
        return self.encoder(value, encode_options, options)

    def decode(self, raw, decode_options, options):
        return self.decoder(raw, decode_options, options)

    def validate(self, value, validate_options, options):
        return self.validator(value, validate_options, options)

    def arbitrary(self, max_depth, options):
        return self.generator(max_depth, options)


class PluginRegistry:
    """Open map from custom type name to its plugin."""

    def __init__(self) -> None:
        self._plugins: dict[str, CustomTypePlugin] = {}
        self._lock = threading.Lock()

    def register(
        self, type_name: str, plugin: CustomTypePlugin, *, replace: bool = False
    ) -> CustomTypePlugin:
        if not isinstance(plugin, CustomTypePlugin):
            raise TypeError(
                f"{type(plugin).__name__} does not implement encode/decode/validate/arbitrary"
            )
        with self._lock:
            if type_name in self._plugins and not replace:
                raise ValueError(f"A plugin named {type_name!r} is already registered")
            self._plugins[type_name] = plugin
        logger.debug("Registered custom type plugin %r", type_name)
        return plugin

    def get(self, type_name: str) -> CustomTypePlugin:
        """
        Raises:
            InternalError: if no plugin was registered under `type_name`
        """
        plugin = self._plugins.get(type_name)
        if plugin is None:
            fail_with_internal_error(f"No custom type plugin registered as {type_name!r}")
        return plugin

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._plugins

    def names(self) -> list[str]:
        return sorted(self._plugins)


default_registry = PluginRegistry()
