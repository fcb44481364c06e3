from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from jsonvalue import Json
from recordset import string_field_of


class GroupTotals:
    """
    Per-tag record counts.

    Grouping is exact string equality on the key field: "[ERROR]" and
    "[error]" are different groups. Output is always sorted by tag.
    """

    def __init__(self, key: str = "severity"):
        self.key = key
        self.total = 0

        # tag -> count
        self._counts: Dict[str, int] = defaultdict(int)

    # ---------- Write API ----------

    def add(self, record: Json, index: int = 0):
        tag = string_field_of(record, index, self.key)
        self._counts[tag] += 1
        self.total += 1

    # ---------- Read APIs ----------

    def items(self) -> List[Tuple[str, int]]:
        return sorted(self._counts.items())

    def count(self, tag: str) -> int:
        return self._counts.get(tag, 0)

    def render_mapping(self) -> Dict[str, int]:
        return dict(self.items())

    def render_pairs(self) -> List[Dict[str, int]]:
        """The `group_by(.severity) | map({(tag): length})` shape."""
        return [{tag: count} for tag, count in self.items()]

    def render_text(self) -> List[str]:
        # count first so the numbers line up on the left edge
        return [f"{count} {tag}" for tag, count in self.items()]


def group_totals(records: Iterable[Json], key: str = "severity") -> GroupTotals:
    totals = GroupTotals(key=key)
    for idx, record in enumerate(records):
        totals.add(record, idx)
    return totals
