import json
import sys
from pathlib import Path
from typing import Optional

from errors import DocumentError
from jsonvalue import Json
from logsetup import get_logger


log = get_logger(__name__)

STDIO = "-"


# ---------- Reading ----------

def read_text(source: str) -> str:
    if source == STDIO:
        try:
            return sys.stdin.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError("<stdin>", str(e)) from e

    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(source, str(e)) from e


def _reject_constant(name: str):
    # NaN and Infinity are Python extensions, not JSON
    raise ValueError(f"invalid JSON literal {name}")


def parse_json(text: str, source: str = "<string>") -> Json:
    """
    Parse a whole JSON document.

    Failures carry the line/column reported by the decoder so the
    caller can point at the broken spot.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise DocumentError(source, e.msg, e.lineno, e.colno) from e
    except ValueError as e:
        raise DocumentError(source, str(e)) from e
    except RecursionError as e:
        raise DocumentError(source, "document nested too deeply") from e


def load_json(source: str) -> Json:
    return parse_json(read_text(source), source)


# ---------- Writing ----------

def dump_json(doc: Json, indent: Optional[int] = 2, compact: bool = False) -> str:
    if compact:
        return json.dumps(doc, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    return json.dumps(doc, ensure_ascii=False, indent=indent, allow_nan=False)


def write_output(text: str, output: Optional[str] = None):
    """Write a fully rendered result to a file, or stdout for None / '-'."""
    if not text.endswith("\n"):
        text += "\n"

    if output is None or output == STDIO:
        sys.stdout.write(text)
        return

    path = Path(output)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise DocumentError(output, str(e)) from e
    log.info("wrote %s", path)
