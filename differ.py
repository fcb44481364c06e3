from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from errors import DocumentError
from jsonvalue import Json, jq_unique, structural_equal, value_key
from recordset import project


# ---------- Structural set diff ----------

@dataclass(frozen=True)
class DiffResult:
    missing: List[Json]
    added: List[Json]

    def is_empty(self) -> bool:
        return not self.missing and not self.added

    def to_json(self) -> Dict[str, List[Json]]:
        return {"missing": list(self.missing), "added": list(self.added)}

    @classmethod
    def from_json(cls, doc: Json, source: str = "<diff>") -> "DiffResult":
        if not isinstance(doc, dict):
            raise DocumentError(source, "expected a diff object")
        for side in ("missing", "added"):
            if not isinstance(doc.get(side, []), list):
                raise DocumentError(source, f"{side!r} must be an array")
        return cls(missing=doc.get("missing", []), added=doc.get("added", []))


def subtract(left: List[Json], right: List[Json]) -> List[Json]:
    """
    jq's array subtraction `left - right`.

    Every element of left is kept unless a deep-equal element exists
    anywhere in right. Duplicates in left are tested independently,
    so this is membership filtering, not multiset difference. Order
    of surviving elements follows left.
    """
    present = {value_key(v) for v in right}
    return [v for v in left if value_key(v) not in present]


def diff(left: List[Json], right: List[Json]) -> DiffResult:
    return DiffResult(
        missing=subtract(left, right),
        added=subtract(right, left),
    )


def documents_equal(left: Json, right: Json) -> bool:
    return structural_equal(left, right)


def missing_summary(result: DiffResult) -> str:
    return f"{len(result.missing)} keys were not found."


# ---------- Key-set diff ----------

@dataclass(frozen=True)
class KeyDiffResult:
    missing_keys: List[Json]
    added_keys: List[Json]

    def to_json(self) -> Dict[str, List[Json]]:
        return {
            "missing_keys": list(self.missing_keys),
            "added_keys": list(self.added_keys),
        }


def key_diff(
    left: List[Json],
    right: List[Json],
    key: str = "severity",
) -> KeyDiffResult:
    """
    Diff the distinct values of one field rather than whole records.

    Answers "does the new document still carry every category?"
    regardless of how many records share a category. Both sides are
    deduplicated and returned in jq `unique` order.
    """
    left_keys = jq_unique(project(left, key))
    right_keys = jq_unique(project(right, key))

    return KeyDiffResult(
        missing_keys=subtract(left_keys, right_keys),
        added_keys=subtract(right_keys, left_keys),
    )


def no_missing_keys(result: KeyDiffResult) -> bool:
    return not result.missing_keys


def no_added_keys(result: KeyDiffResult) -> bool:
    return not result.added_keys


CONFORMANCE_CHECKS: Dict[str, Tuple[Callable[[KeyDiffResult], bool], ...]] = {
    "missing": (no_missing_keys,),
    "added": (no_added_keys,),
    "both": (no_missing_keys, no_added_keys),
    "none": (),
}


def is_conformant(result: KeyDiffResult, check: str = "missing") -> bool:
    try:
        predicates = CONFORMANCE_CHECKS[check]
    except KeyError as e:
        raise ValueError(
            f"unknown conformance check {check!r}, expected one of {sorted(CONFORMANCE_CHECKS)}"
        ) from e

    return all(p(result) for p in predicates)
