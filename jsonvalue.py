from enum import Enum
from typing import Any, Tuple


# JSON as produced by json.loads: None, bool, int, float, str, list, dict.
Json = Any


class JsonType(str, Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


SCALAR_TYPES = frozenset(
    {JsonType.NULL, JsonType.BOOLEAN, JsonType.NUMBER, JsonType.STRING}
)


def type_of(value: Json) -> JsonType:
    # bool before int: True is an int in Python but never a JSON number
    if value is None:
        return JsonType.NULL
    if isinstance(value, bool):
        return JsonType.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonType.NUMBER
    if isinstance(value, str):
        return JsonType.STRING
    if isinstance(value, list):
        return JsonType.ARRAY
    if isinstance(value, dict):
        return JsonType.OBJECT
    raise TypeError(f"Unsupported JSON type: {type(value).__name__}")


# ---------- Ordering / identity ----------

def value_key(value: Json) -> Tuple:
    """
    Hashable canonical form of a JSON value.

    Two values have equal keys iff they are structurally equal, and
    comparing keys reproduces jq's total order:

      null < false < true < numbers < strings < arrays < objects

    Objects compare by their sorted key list first, then by values
    taken in sorted-key order, so insertion order never matters.

    Recursive: nesting past the interpreter recursion limit raises
    RecursionError.
    """
    kind = type_of(value)

    if kind is JsonType.NULL:
        return (0,)
    if kind is JsonType.BOOLEAN:
        return (2,) if value else (1,)
    if kind is JsonType.NUMBER:
        return (3, value)
    if kind is JsonType.STRING:
        return (4, value)
    if kind is JsonType.ARRAY:
        return (5, tuple(value_key(item) for item in value))

    keys = tuple(sorted(value))
    return (6, keys, tuple(value_key(value[k]) for k in keys))


def structural_equal(left: Json, right: Json) -> bool:
    return value_key(left) == value_key(right)


def jq_sorted(values):
    return sorted(values, key=value_key)


def jq_unique(values):
    """Deduplicate and sort, like jq's `unique`."""
    seen = {}
    for value in values:
        seen.setdefault(value_key(value), value)
    return [seen[k] for k in sorted(seen)]
