import json
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from errors import PathResolutionError
from jsonvalue import SCALAR_TYPES, Json, JsonType, type_of


Segment = Union[int, str]


def render_segments(segments: Sequence[Segment]) -> str:
    """
    Canonical accessor chain:
      ()                    -> .
      (0, "severity")       -> .[0]["severity"]

    Keys are JSON-quoted so any key (spaces, quotes, unicode) renders
    unambiguously; the result is also a valid jq path expression.
    """
    if not segments:
        return "."

    parts = []
    for seg in segments:
        if isinstance(seg, int):
            parts.append(f"[{seg}]")
        else:
            parts.append(f"[{json.dumps(seg, ensure_ascii=False)}]")
    return "." + "".join(parts)


@dataclass(frozen=True)
class SchemaPath:
    segments: Tuple[Segment, ...]
    type: JsonType

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def is_leaf(self) -> bool:
        return self.type in SCALAR_TYPES

    def render(self) -> str:
        return render_segments(self.segments)

    def to_json(self) -> Dict[str, Json]:
        return {
            "path": self.render(),
            "segments": list(self.segments),
            "type": self.type.value,
        }


# ---------- Resolution ----------

def resolve(doc: Json, segments: Sequence[Segment]) -> Json:
    node = doc
    for i, seg in enumerate(segments):
        walked = segments[: i + 1]

        # bool is an int subclass but never a valid index
        if isinstance(seg, int) and not isinstance(seg, bool):
            if not isinstance(node, list):
                raise PathResolutionError(walked, f"cannot index {type_of(node).value} with a number")
            if not 0 <= seg < len(node):
                raise PathResolutionError(walked, f"index {seg} out of range")
            node = node[seg]
        elif isinstance(seg, str):
            if not isinstance(node, dict):
                raise PathResolutionError(walked, f"cannot index {type_of(node).value} with a string")
            if seg not in node:
                raise PathResolutionError(walked, f"no such key {seg!r}")
            node = node[seg]
        else:
            raise PathResolutionError(walked, f"invalid segment {seg!r}")

    return node


# ---------- Enumeration ----------

def iter_paths(doc: Json, max_depth: Optional[int] = None) -> Iterator[SchemaPath]:
    """
    Lazily enumerate every addressable node of a document.

    Order is depth-first pre-order: the root first, then children by
    ascending array index / object key order as found in the document.
    Nodes deeper than max_depth (root is depth 0) are skipped, not
    reported as errors.

    The walk itself is iterative; deep documents are bounded only by
    what json.loads accepts.
    """
    stack: List[Tuple[Tuple[Segment, ...], Json]] = [((), doc)]

    while stack:
        segments, node = stack.pop()
        path = SchemaPath(segments=segments, type=type_of(node))
        if max_depth is not None and path.depth > max_depth:
            continue

        yield path

        kind = path.type
        if kind is JsonType.ARRAY:
            children = [(segments + (idx,), item) for idx, item in enumerate(node)]
        elif kind is JsonType.OBJECT:
            children = [(segments + (key,), value) for key, value in node.items()]
        else:
            continue

        stack.extend(reversed(children))


def leaf_paths(doc: Json, max_depth: Optional[int] = None) -> Iterator[SchemaPath]:
    return (p for p in iter_paths(doc, max_depth) if p.is_leaf)


def count_scalars(doc: Json) -> int:
    total = 0
    stack = [doc]
    while stack:
        node = stack.pop()
        kind = type_of(node)
        if kind is JsonType.ARRAY:
            stack.extend(node)
        elif kind is JsonType.OBJECT:
            stack.extend(node.values())
        else:
            total += 1
    return total


def render_text(paths) -> List[str]:
    """`path<TAB>type` lines, the shape `paste` produced in the walkthrough."""
    return [f"{p.render()}\t{p.type.value}" for p in paths]
