from typing import List


def lift_text(text: str) -> List[str]:
    """
    Turn raw line-oriented text into an ordered array of line strings.

    Equivalent to `jq --slurp --raw-input 'split("\\n")'`, except that
    the single empty element produced by a trailing newline is dropped:
    a file written by `echo` lifts to exactly one string per line.
    Interior blank lines are kept.
    """
    if not text:
        return []

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()

    return lines
