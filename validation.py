import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from errors import DocumentError, PathResolutionError
from jsonvalue import Json, JsonType, type_of
from pathschema import Segment, leaf_paths, render_segments, resolve


MISSING = "missing"


# ---------- Model ----------

@dataclass(frozen=True)
class TypeCheck:
    segments: Tuple[Segment, ...]
    expected: JsonType

    @property
    def path(self) -> str:
        return render_segments(self.segments)


@dataclass(frozen=True)
class CheckFailure:
    path: str
    expected: str
    actual: str


@dataclass
class ValidationReport:
    total: int = 0
    failures: List[CheckFailure] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures

    def to_json(self) -> Dict[str, Json]:
        return {
            "checked": self.total,
            "failed": len(self.failures),
            "failures": [
                {"path": f.path, "expected": f.expected, "actual": f.actual}
                for f in self.failures
            ],
        }


# ---------- Generation ----------

def generate_checks(doc: Json, max_depth: Optional[int] = None) -> List[TypeCheck]:
    """One type assertion per scalar leaf, in enumeration order."""
    return [
        TypeCheck(segments=p.segments, expected=p.type)
        for p in leaf_paths(doc, max_depth)
    ]


def checks_to_json(checks: Sequence[TypeCheck]) -> Dict[str, Json]:
    return {
        "checks": [
            {
                "path": c.path,
                "segments": list(c.segments),
                "type": c.expected.value,
            }
            for c in checks
        ]
    }


def checks_from_json(doc: Json, source: str = "<checks>") -> List[TypeCheck]:
    if not isinstance(doc, dict) or not isinstance(doc.get("checks"), list):
        raise DocumentError(source, "expected an object with a 'checks' array")

    checks = []
    for idx, entry in enumerate(doc["checks"]):
        try:
            segments = entry["segments"]
            expected = JsonType(entry["type"])
        except (TypeError, KeyError, ValueError) as e:
            raise DocumentError(source, f"check {idx} is malformed: {e}") from e

        if not isinstance(segments, list) or not all(
            isinstance(s, str) or (isinstance(s, int) and not isinstance(s, bool))
            for s in segments
        ):
            raise DocumentError(source, f"check {idx} has invalid segments")

        checks.append(TypeCheck(segments=tuple(segments), expected=expected))

    return checks


def render_shell(checks: Sequence[TypeCheck]) -> str:
    """
    Render checks as a standalone POSIX sh script driving `jq -e`.

    Usage of the generated script: sh checks.sh document.json
    Exit status is 0 only when every assertion holds.
    """
    lines = [
        "#!/bin/sh",
        "# Generated per-path type assertions.",
        "set -u",
        'doc="${1:?usage: $0 document.json}"',
        "failures=0",
        "",
        "check() {",
        '    if ! jq -e --arg t "$2" "($1 | type) == \\$t" "$doc" >/dev/null 2>&1; then',
        '        echo "FAIL $1: expected $2" >&2',
        "        failures=$((failures + 1))",
        "    fi",
        "}",
        "",
    ]
    for c in checks:
        lines.append(f"check {shlex.quote(c.path)} {c.expected.value}")

    lines += ["", '[ "$failures" -eq 0 ]']
    return "\n".join(lines) + "\n"


# ---------- Execution ----------

def run_checks(checks: Sequence[TypeCheck], target: Json) -> ValidationReport:
    report = ValidationReport()

    for check in checks:
        report.total += 1
        try:
            actual = type_of(resolve(target, check.segments)).value
        except PathResolutionError:
            actual = MISSING

        if actual != check.expected.value:
            report.failures.append(
                CheckFailure(
                    path=check.path,
                    expected=check.expected.value,
                    actual=actual,
                )
            )

    return report
