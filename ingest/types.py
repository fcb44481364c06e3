from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class LogRecord:
    """
    One indexed log line.

    The severity token is kept verbatim (brackets included) and is
    never validated: any leading token is a valid tag.
    """
    severity: str
    message: str

    def to_json(self) -> Dict[str, str]:
        return {"severity": self.severity, "message": self.message}


@dataclass(frozen=True)
class MalformedRecord:
    """A line that could not be split into severity and message."""
    line_number: int
    raw: str
    reason: str


@dataclass
class IndexStats:
    parsed: int = 0
    skipped: int = 0
    malformed: List[MalformedRecord] = field(default_factory=list)

    def record_success(self):
        self.parsed += 1

    def record_failure(self, record: MalformedRecord):
        self.skipped += 1
        self.malformed.append(record)
