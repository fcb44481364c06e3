import random
from pathlib import Path
from typing import List, Optional


EXAMPLE_LINES = [
    "[DEBUG] foo",
    "[ERROR] bar",
    "[ERROR] baz",
    "[INFO] boz",
]

SEVERITIES = ["[DEBUG]", "[INFO]", "[WARN]", "[ERROR]"]
WORDS = ["foo", "bar", "baz", "boz", "timeout", "retry", "cache", "miss", "user", "login"]


def example_log() -> str:
    return "\n".join(EXAMPLE_LINES) + "\n"


def random_lines(count: int, seed: Optional[int] = None) -> List[str]:
    rng = random.Random(seed)
    lines = []

    for _ in range(count):
        severity = rng.choice(SEVERITIES)
        words = rng.sample(WORDS, k=rng.randint(1, 3))
        lines.append(f"{severity} {' '.join(words)}")

    return lines


def generate_log(
    filename="example.log",
    target_lines: Optional[int] = None,
    seed: Optional[int] = None,
) -> Path:
    """
    Write the fixed four-line example log, or target_lines random
    severity lines when a size is given. The same seed always
    produces the same file.
    """
    if target_lines is None:
        text = example_log()
    else:
        text = "".join(line + "\n" for line in random_lines(target_lines, seed))

    path = Path(filename)
    path.write_text(text, encoding="utf-8")
    return path
