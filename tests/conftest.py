from typing import Any

import pytest

from mosaic import array, enumeration, integer, object_, string


def tree():
    return object_({"value": integer(), "children": array(tree)})


@pytest.fixture(scope="function")
def user_type():
    return object_(
        {
            "username": string(min_length=1),
            "age": integer(minimum=0).optional(),
            "kind": enumeration(["ADMIN", "NORMAL"]),
        }
    )


@pytest.fixture(scope="function")
def tree_type():
    return tree


@pytest.fixture(scope="function")
def raw_user() -> dict[str, Any]:
    return {"username": "alice", "age": 42, "kind": "ADMIN"}
