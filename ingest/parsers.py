import re
from typing import Union

from .types import LogRecord, MalformedRecord


# First whitespace character separates the severity tag from the message.
SEPARATOR_RE = re.compile(r"\s")


def parse_line(line: str, line_number: int = 1) -> Union[LogRecord, MalformedRecord]:
    """
    Parse lines like:
      [ERROR] bar
      [INFO] disk usage at 91%

    The message is everything after the first whitespace character,
    verbatim (it may be empty or contain further spaces).

    Never raises: a line without a separator, or one that starts with
    whitespace, comes back as a MalformedRecord.
    """
    parts = SEPARATOR_RE.split(line, maxsplit=1)

    if len(parts) < 2:
        reason = "empty line" if not line else "no whitespace after severity"
        return MalformedRecord(line_number=line_number, raw=line, reason=reason)

    severity, message = parts
    if not severity:
        return MalformedRecord(
            line_number=line_number,
            raw=line,
            reason="line starts with whitespace",
        )

    return LogRecord(severity=severity, message=message)
