from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from differ import diff, key_diff, missing_summary
from documents import dump_json
from ingest.ingest import index_lines
from ingest.lift import lift_text
from jsonp import to_jsonp
from loggen import generate_log
from logsetup import get_logger
from pathschema import iter_paths
from recordset import exclude, prepend
from totals import group_totals
from validation import checks_to_json, generate_checks, render_shell


log = get_logger(__name__)

HELLO_RECORD = {"severity": "[DEBUG]", "message": "hello world!"}


@dataclass
class CookbookRun:
    workdir: Path
    files: List[Path] = field(default_factory=list)
    summary: str = ""


def run_cookbook(
    workdir,
    policy: str = "fail",
    indent: Optional[int] = 2,
    max_depth: Optional[int] = None,
    jsonp_callback: str = "callback",
) -> CookbookRun:
    """
    Replay the whole walkthrough, writing each intermediate file in
    the order a reader following along would create it:

      example.log
        → log_lines.json → severity_index.json
          → totals.json / totals.txt
          → for_comparison.json → advanced_comparison.json
            → an_actual_diff.json / key_diff.json
          → schema.json / checks.json / checks.sh
          → severity_index.js
    """
    workdir = Path(workdir)
    workdir.mkdir(parents=True, exist_ok=True)
    run = CookbookRun(workdir=workdir)

    def write(name: str, text: str):
        path = workdir / name
        path.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
        run.files.append(path)
        log.info("wrote %s", path)

    def write_json(name: str, doc):
        write(name, dump_json(doc, indent=indent))

    # ---- Data ----
    example = generate_log(workdir / "example.log")
    run.files.append(example)

    lines = lift_text(example.read_text(encoding="utf-8"))
    write_json("log_lines.json", lines)

    # ---- Analysis ----
    records, _ = index_lines(lines, policy=policy)
    index = [r.to_json() for r in records]
    write_json("severity_index.json", index)

    totals = group_totals(index)
    write_json("totals.json", totals.render_mapping())
    write("totals.txt", "\n".join(totals.render_text()))

    # ---- Diff ----
    for_comparison = exclude(index, "severity", "[ERROR]", sort=True)
    write_json("for_comparison.json", for_comparison)

    advanced = prepend(for_comparison, HELLO_RECORD)
    write_json("advanced_comparison.json", advanced)

    result = diff(index, advanced)
    write_json("an_actual_diff.json", result.to_json())
    write_json("key_diff.json", key_diff(index, advanced).to_json())

    # ---- Schema ----
    write_json("schema.json", [p.to_json() for p in iter_paths(index, max_depth)])

    checks = generate_checks(index, max_depth)
    write_json("checks.json", checks_to_json(checks))
    write("checks.sh", render_shell(checks))

    write("severity_index.js", to_jsonp(index, jsonp_callback))

    run.summary = missing_summary(result)
    return run
