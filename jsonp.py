import re

from documents import dump_json
from jsonvalue import Json


CALLBACK_RE = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")


def to_jsonp(doc: Json, callback: str = "callback") -> str:
    """
    Wrap a document as a JSONP payload: callback({...});

    The body is compact JSON. The callback must be a (dotted)
    JavaScript identifier; anything else is rejected rather than
    escaped.
    """
    if not CALLBACK_RE.fullmatch(callback):
        raise ValueError(f"invalid JSONP callback name: {callback!r}")

    body = dump_json(doc, compact=True)
    # U+2028/U+2029 are legal in JSON strings but end a line in older JavaScript
    body = body.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")

    return f"{callback}({body});"
