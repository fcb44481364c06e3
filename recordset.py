from typing import List

from errors import DocumentError, RecordShapeError
from jsonvalue import Json, jq_sorted, structural_equal, type_of


def ensure_array(doc: Json, source: str = "<document>") -> List[Json]:
    if not isinstance(doc, list):
        raise DocumentError(source, f"expected a JSON array, got {type_of(doc).value}")
    return doc


def field_of(record: Json, index: int, key: str) -> Json:
    if not isinstance(record, dict):
        raise RecordShapeError(index, f"expected an object, got {type_of(record).value}")
    if key not in record:
        raise RecordShapeError(index, f"missing field {key!r}")
    return record[key]


def string_field_of(record: Json, index: int, key: str) -> str:
    value = field_of(record, index, key)
    if not isinstance(value, str):
        raise RecordShapeError(
            index, f"field {key!r} must be a string, got {type_of(value).value}"
        )
    return value


def project(records: List[Json], key: str) -> List[Json]:
    """`[.[].key]` with an error instead of null for absent fields."""
    return [field_of(r, idx, key) for idx, r in enumerate(records)]


def exclude(
    records: List[Json],
    key: str,
    value: Json,
    sort: bool = False,
) -> List[Json]:
    """
    `map(select(.key != value))`, optionally followed by `sort`.

    Records lacking the field are kept, matching jq where a missing
    field reads as null.
    """
    kept = []
    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            raise RecordShapeError(idx, f"expected an object, got {type_of(record).value}")
        if key in record and structural_equal(record[key], value):
            continue
        kept.append(record)

    return jq_sorted(kept) if sort else kept


def prepend(records: List[Json], *new_records: Json) -> List[Json]:
    return list(new_records) + list(records)
