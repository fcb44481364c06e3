import argparse
import sys
from typing import List, Optional

from cookbook import run_cookbook
from differ import (
    CONFORMANCE_CHECKS,
    DiffResult,
    diff,
    documents_equal,
    is_conformant,
    key_diff,
    missing_summary,
)
from documents import dump_json, load_json, parse_json, read_text, write_output
from errors import JqRecipesError
from ingest.ingest import index_lines
from ingest.lift import lift_text
from jsonp import to_jsonp
from loggen import generate_log
from logsetup import configure_logging, get_logger
from pathschema import iter_paths, render_text
from recordset import ensure_array, exclude, prepend
from settings import MALFORMED_POLICIES, Settings, load_settings
from totals import group_totals
from validation import (
    checks_from_json,
    checks_to_json,
    generate_checks,
    render_shell,
    run_checks,
)


log = get_logger("jqrecipes")

EXIT_OK = 0
EXIT_NONCONFORMANT = 1
EXIT_ERROR = 2


# ---------------- CLI ----------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jqrecipes",
        description="jq cookbook recipes as named JSON transformations",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress (written files, skipped lines) to stderr",
    )

    output = argparse.ArgumentParser(add_help=False)
    output.add_argument("-o", "--output", default=None, help="Output file (default: stdout)")
    output.add_argument("--compact", action="store_true", help="Compact JSON output")
    output.add_argument("--indent", type=int, default=None, help="Pretty-print indent")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("to-json", parents=[output], help="Lift a text file into a JSON array of lines")
    p.add_argument("input")

    p = sub.add_parser("index", parents=[output], help="Index lines into severity/message records")
    p.add_argument("input", help="JSON array of lines (or raw text with --text)")
    p.add_argument("--text", action="store_true", help="Input is raw log text")
    p.add_argument("--malformed", choices=MALFORMED_POLICIES, default=None)

    p = sub.add_parser("totals", parents=[output], help="Count records per severity")
    p.add_argument("input")
    p.add_argument("--by", default="severity", help="Field to group by")
    p.add_argument("--format", choices=("mapping", "pairs", "text"), default="mapping")

    p = sub.add_parser("diff", parents=[output], help="Structural diff of two record arrays")
    p.add_argument("left")
    p.add_argument("right")
    p.add_argument(
        "--exit-status",
        action="store_true",
        help="Exit 1 when the arrays differ",
    )

    p = sub.add_parser("key-diff", parents=[output], help="Diff the distinct values of one field")
    p.add_argument("left")
    p.add_argument("right")
    p.add_argument("--key", default="severity")
    p.add_argument(
        "--check",
        choices=sorted(CONFORMANCE_CHECKS),
        default="missing",
        help="Which direction must be empty for exit status 0",
    )

    p = sub.add_parser("equal", parents=[output], help="Exit 1 unless two documents are equal")
    p.add_argument("left")
    p.add_argument("right")

    p = sub.add_parser("exclude", parents=[output], help="Drop records whose field equals a value")
    p.add_argument("input")
    p.add_argument("--key", default="severity")
    p.add_argument("--value", required=True)
    p.add_argument("--sort", action="store_true", help="Sort the remaining records")

    p = sub.add_parser("prepend", parents=[output], help="Prepend a JSON record to an array")
    p.add_argument("input")
    p.add_argument("--record", required=True, help="Record as JSON text")

    p = sub.add_parser("report", parents=[output], help="Summarize a diff file")
    p.add_argument("input")

    p = sub.add_parser("lint", help="Check that a file is valid JSON")
    p.add_argument("input")

    p = sub.add_parser("schema-dump", parents=[output], help="Enumerate every path and its type")
    p.add_argument("input")
    p.add_argument("--max-depth", type=non_negative_int, default=None)
    p.add_argument("--format", choices=("json", "text"), default="json")
    p.add_argument(
        "--script",
        choices=("json", "sh"),
        default=None,
        help="Emit a validation script instead of the path list",
    )

    p = sub.add_parser("validate", parents=[output], help="Run type checks against a document")
    p.add_argument("checks", help="Checks file (or a reference document with --reference)")
    p.add_argument("target")
    p.add_argument(
        "--reference",
        action="store_true",
        help="First argument is a reference document; checks are generated from it",
    )
    p.add_argument("--max-depth", type=non_negative_int, default=None)

    p = sub.add_parser("jsonp", help="Wrap a document as a JSONP payload")
    p.add_argument("input")
    p.add_argument("-o", "--output", default=None)
    p.add_argument("--callback", default=None)

    p = sub.add_parser("cookbook", help="Replay the whole walkthrough into a directory")
    p.add_argument("--workdir", default=".")
    p.add_argument("--max-depth", type=non_negative_int, default=None)

    p = sub.add_parser("loggen", help="Write the example log (or a random one)")
    p.add_argument("-o", "--output", default="example.log")
    p.add_argument("--lines", type=int, default=None)
    p.add_argument("--seed", type=int, default=None)

    return parser


def non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from e
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def parse_args(argv: Optional[List[str]] = None):
    return build_parser().parse_args(argv)


# ---------------- Helpers ----------------

def emit_json(doc, args, settings: Settings):
    indent = settings.indent if args.indent is None else args.indent
    write_output(dump_json(doc, indent=indent, compact=args.compact), args.output)


def load_array(source: str):
    return ensure_array(load_json(source), source)


def max_depth_of(args, settings: Settings) -> Optional[int]:
    return settings.max_depth if args.max_depth is None else args.max_depth


# ---------------- Commands ----------------

def cmd_to_json(args, settings: Settings) -> int:
    emit_json(lift_text(read_text(args.input)), args, settings)
    return EXIT_OK


def cmd_index(args, settings: Settings) -> int:
    if args.text:
        lines = lift_text(read_text(args.input))
    else:
        lines = load_array(args.input)

    policy = args.malformed or settings.malformed_policy
    records, stats = index_lines(lines, policy=policy)

    if stats.skipped:
        log.warning("indexed %d lines, skipped %d malformed", stats.parsed, stats.skipped)

    emit_json([r.to_json() for r in records], args, settings)
    return EXIT_OK


def cmd_totals(args, settings: Settings) -> int:
    totals = group_totals(load_array(args.input), key=args.by)

    if args.format == "text":
        write_output("\n".join(totals.render_text()), args.output)
    elif args.format == "pairs":
        emit_json(totals.render_pairs(), args, settings)
    else:
        emit_json(totals.render_mapping(), args, settings)
    return EXIT_OK


def cmd_diff(args, settings: Settings) -> int:
    result = diff(load_array(args.left), load_array(args.right))
    emit_json(result.to_json(), args, settings)

    if args.exit_status and not result.is_empty():
        return EXIT_NONCONFORMANT
    return EXIT_OK


def cmd_key_diff(args, settings: Settings) -> int:
    result = key_diff(load_array(args.left), load_array(args.right), key=args.key)
    emit_json(result.to_json(), args, settings)

    if not is_conformant(result, args.check):
        log.warning("key set does not conform (check=%s)", args.check)
        return EXIT_NONCONFORMANT
    return EXIT_OK


def cmd_equal(args, settings: Settings) -> int:
    left = load_json(args.left)
    right = load_json(args.right)

    if documents_equal(left, right):
        return EXIT_OK

    payload = {"equal": False}
    if isinstance(left, list) and isinstance(right, list):
        payload.update(diff(left, right).to_json())
    else:
        payload.update({"left": left, "right": right})

    emit_json(payload, args, settings)
    return EXIT_NONCONFORMANT


def cmd_exclude(args, settings: Settings) -> int:
    kept = exclude(load_array(args.input), args.key, args.value, sort=args.sort)
    emit_json(kept, args, settings)
    return EXIT_OK


def cmd_prepend(args, settings: Settings) -> int:
    record = parse_json(args.record, "--record")
    emit_json(prepend(load_array(args.input), record), args, settings)
    return EXIT_OK


def cmd_report(args, settings: Settings) -> int:
    result = DiffResult.from_json(load_json(args.input), args.input)
    write_output(missing_summary(result), args.output)
    return EXIT_OK


def cmd_lint(args, settings: Settings) -> int:
    # quiet like `jsonlint -q`: parse errors surface through the error path
    load_json(args.input)
    return EXIT_OK


def cmd_schema_dump(args, settings: Settings) -> int:
    doc = load_json(args.input)
    max_depth = max_depth_of(args, settings)

    if args.script == "sh":
        write_output(render_shell(generate_checks(doc, max_depth)), args.output)
    elif args.script == "json":
        emit_json(checks_to_json(generate_checks(doc, max_depth)), args, settings)
    elif args.format == "text":
        write_output("\n".join(render_text(iter_paths(doc, max_depth))), args.output)
    else:
        emit_json([p.to_json() for p in iter_paths(doc, max_depth)], args, settings)
    return EXIT_OK


def cmd_validate(args, settings: Settings) -> int:
    if args.reference:
        checks = generate_checks(load_json(args.checks), max_depth_of(args, settings))
    else:
        checks = checks_from_json(load_json(args.checks), args.checks)

    report = run_checks(checks, load_json(args.target))
    emit_json(report.to_json(), args, settings)

    if not report.passed:
        log.warning("%d of %d type checks failed", len(report.failures), report.total)
        return EXIT_NONCONFORMANT
    return EXIT_OK


def cmd_jsonp(args, settings: Settings) -> int:
    callback = args.callback or settings.jsonp_callback
    write_output(to_jsonp(load_json(args.input), callback), args.output)
    return EXIT_OK


def cmd_cookbook(args, settings: Settings) -> int:
    run = run_cookbook(
        args.workdir,
        policy=settings.malformed_policy,
        indent=settings.indent,
        max_depth=max_depth_of(args, settings),
        jsonp_callback=settings.jsonp_callback,
    )

    print("\nCookbook files")
    for path in run.files:
        print(f"  {path}")
    print(f"\n{run.summary}")
    return EXIT_OK


def cmd_loggen(args, settings: Settings) -> int:
    path = generate_log(args.output, target_lines=args.lines, seed=args.seed)
    log.info("wrote %s", path)
    return EXIT_OK


COMMANDS = {
    "to-json": cmd_to_json,
    "index": cmd_index,
    "totals": cmd_totals,
    "diff": cmd_diff,
    "key-diff": cmd_key_diff,
    "equal": cmd_equal,
    "exclude": cmd_exclude,
    "prepend": cmd_prepend,
    "report": cmd_report,
    "lint": cmd_lint,
    "schema-dump": cmd_schema_dump,
    "validate": cmd_validate,
    "jsonp": cmd_jsonp,
    "cookbook": cmd_cookbook,
    "loggen": cmd_loggen,
}


# ---------------- Main ----------------

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        configure_logging()
        log.error("%s", e)
        return EXIT_ERROR

    configure_logging("INFO" if args.verbose else settings.log_level)

    try:
        return COMMANDS[args.command](args, settings)
    except (JqRecipesError, ValueError, OSError) as e:
        log.error("%s", e)
        return EXIT_ERROR
    except RecursionError:
        log.error("document nested too deeply")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
