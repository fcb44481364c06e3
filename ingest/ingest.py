from typing import Iterable, List, Tuple

from errors import MalformedRecordError, RecordShapeError
from logsetup import get_logger

from .parsers import parse_line
from .types import IndexStats, LogRecord, MalformedRecord


log = get_logger(__name__)


def index_lines(
    lines: Iterable[str],
    policy: str = "fail",
) -> Tuple[List[LogRecord], IndexStats]:
    """
    Index raw log lines into LogRecords.

    Pipeline:
      lifted line
        → first-whitespace split
          → LogRecord | MalformedRecord

    policy:
      - "fail": the first malformed line raises MalformedRecordError
      - "skip": malformed lines are logged, counted and dropped
    """
    if policy not in ("fail", "skip"):
        raise ValueError(f"unknown malformed-line policy: {policy!r}")

    records: List[LogRecord] = []
    stats = IndexStats()

    for idx, line in enumerate(lines):
        if not isinstance(line, str):
            raise RecordShapeError(idx, f"expected a string line, got {type(line).__name__}")

        parsed = parse_line(line, line_number=idx + 1)

        if isinstance(parsed, MalformedRecord):
            if policy == "fail":
                raise MalformedRecordError(parsed)

            log.warning(
                "skipping line %d (%s): %r",
                parsed.line_number,
                parsed.reason,
                parsed.raw,
            )
            stats.record_failure(parsed)
            continue

        stats.record_success()
        records.append(parsed)

    return records, stats
