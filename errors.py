from typing import Optional, Sequence, Union


class JqRecipesError(Exception):
    """Base class for every failure that should abort a single invocation."""


class DocumentError(JqRecipesError):
    def __init__(
        self,
        source: str,
        reason: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.source = source
        self.reason = reason
        self.line = line
        self.column = column

        where = source
        if line is not None:
            where = f"{source}:{line}:{column}"
        super().__init__(f"{where}: {reason}")


class MalformedRecordError(JqRecipesError):
    def __init__(self, record):
        self.record = record
        super().__init__(
            f"line {record.line_number}: {record.reason}: {record.raw!r}"
        )


class RecordShapeError(JqRecipesError):
    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"record {index}: {reason}")


class PathResolutionError(JqRecipesError):
    def __init__(self, segments: Sequence[Union[int, str]], reason: str):
        self.segments = tuple(segments)
        self.reason = reason
        super().__init__(f"cannot resolve {list(self.segments)!r}: {reason}")
