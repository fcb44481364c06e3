import io
import json

import pytest

from cli import EXIT_ERROR, EXIT_NONCONFORMANT, EXIT_OK, main


INDEX = [
    {"severity": "[DEBUG]", "message": "foo"},
    {"severity": "[ERROR]", "message": "bar"},
    {"severity": "[ERROR]", "message": "baz"},
    {"severity": "[INFO]", "message": "boz"},
]
ADVANCED = [
    {"severity": "[DEBUG]", "message": "hello world!"},
    {"severity": "[DEBUG]", "message": "foo"},
    {"severity": "[INFO]", "message": "boz"},
]


def write_json(path, doc):
    path.write_text(json.dumps(doc), encoding="utf-8")
    return str(path)


def test_lift_index_totals_pipeline(tmp_path, example_log_file, capsys) -> None:
    lines = tmp_path / "log_lines.json"
    index = tmp_path / "severity_index.json"

    assert main(["to-json", str(example_log_file), "-o", str(lines)]) == EXIT_OK
    assert json.loads(lines.read_text()) == ["[DEBUG] foo", "[ERROR] bar", "[ERROR] baz", "[INFO] boz"]

    assert main(["index", str(lines), "-o", str(index)]) == EXIT_OK
    assert json.loads(index.read_text()) == INDEX

    assert main(["totals", str(index)]) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"[DEBUG]": 1, "[ERROR]": 2, "[INFO]": 1}

    assert main(["totals", str(index), "--format", "text"]) == EXIT_OK
    assert capsys.readouterr().out == "1 [DEBUG]\n2 [ERROR]\n1 [INFO]\n"


def test_index_raw_text_and_malformed_policies(tmp_path, capsys) -> None:
    log = tmp_path / "bad.log"
    log.write_text("[INFO] ok\nbroken\n", encoding="utf-8")

    assert main(["index", "--text", str(log)]) == EXIT_ERROR
    assert capsys.readouterr().out == ""

    assert main(["index", "--text", str(log), "--malformed", "skip", "--compact"]) == EXIT_OK
    assert capsys.readouterr().out == '[{"severity":"[INFO]","message":"ok"}]\n'


def test_malformed_policy_from_environment(tmp_path, monkeypatch, capsys) -> None:
    log = tmp_path / "bad.log"
    log.write_text("broken\n[ERROR] x\n", encoding="utf-8")
    monkeypatch.setenv("JQRECIPES_MALFORMED", "skip")

    assert main(["index", "--text", str(log)]) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == [{"severity": "[ERROR]", "message": "x"}]


def test_diff_exit_status(tmp_path, capsys) -> None:
    left = write_json(tmp_path / "a.json", INDEX)
    right = write_json(tmp_path / "b.json", ADVANCED)

    assert main(["diff", left, right]) == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["missing"] == INDEX[1:3]
    assert payload["added"] == ADVANCED[:1]

    assert main(["diff", left, right, "--exit-status"]) == EXIT_NONCONFORMANT
    assert json.loads(capsys.readouterr().out) == payload

    assert main(["diff", left, left, "--exit-status"]) == EXIT_OK


def test_key_diff_checks(tmp_path, capsys) -> None:
    left = write_json(tmp_path / "a.json", INDEX)
    right = write_json(tmp_path / "b.json", ADVANCED)

    assert main(["key-diff", left, right]) == EXIT_NONCONFORMANT
    assert json.loads(capsys.readouterr().out) == {"missing_keys": ["[ERROR]"], "added_keys": []}

    assert main(["key-diff", left, right, "--check", "added"]) == EXIT_OK
    assert main(["key-diff", right, left, "--check", "added"]) == EXIT_NONCONFORMANT
    assert main(["key-diff", right, left, "--check", "none"]) == EXIT_OK


def test_equal(tmp_path, capsys) -> None:
    left = write_json(tmp_path / "a.json", INDEX)
    same = write_json(tmp_path / "same.json", [dict(reversed(list(r.items()))) for r in INDEX])
    right = write_json(tmp_path / "b.json", ADVANCED)

    assert main(["equal", left, same]) == EXIT_OK
    assert capsys.readouterr().out == ""

    assert main(["equal", left, right]) == EXIT_NONCONFORMANT
    payload = json.loads(capsys.readouterr().out)
    assert payload["equal"] is False
    assert payload["added"] == ADVANCED[:1]


def test_exclude_prepend_report(tmp_path, capsys) -> None:
    index = write_json(tmp_path / "index.json", INDEX)
    comparison = tmp_path / "for_comparison.json"
    advanced = tmp_path / "advanced.json"
    an_diff = tmp_path / "diff.json"

    assert main(["exclude", index, "--value", "[ERROR]", "--sort", "-o", str(comparison)]) == EXIT_OK
    assert json.loads(comparison.read_text()) == [
        {"severity": "[INFO]", "message": "boz"},
        {"severity": "[DEBUG]", "message": "foo"},
    ]

    record = '{"severity": "[DEBUG]", "message": "hello world!"}'
    assert main(["prepend", str(comparison), "--record", record, "-o", str(advanced)]) == EXIT_OK
    assert json.loads(advanced.read_text())[0]["message"] == "hello world!"

    assert main(["diff", index, str(advanced), "-o", str(an_diff)]) == EXIT_OK
    assert main(["report", str(an_diff)]) == EXIT_OK
    assert capsys.readouterr().out == "2 keys were not found.\n"


def test_lint_and_parse_errors(tmp_path, capsys) -> None:
    good = write_json(tmp_path / "good.json", INDEX)
    bad = tmp_path / "bad.json"
    bad.write_text('[{"severity": }]', encoding="utf-8")

    assert main(["lint", good]) == EXIT_OK
    assert main(["lint", str(bad)]) == EXIT_ERROR
    assert main(["diff", str(bad), good]) == EXIT_ERROR
    assert main(["lint", str(tmp_path / "absent.json")]) == EXIT_ERROR
    assert capsys.readouterr().out == ""


def test_non_array_input_is_an_error(tmp_path) -> None:
    obj = write_json(tmp_path / "obj.json", {"severity": "[INFO]"})
    assert main(["totals", obj]) == EXIT_ERROR
    assert main(["diff", obj, obj]) == EXIT_ERROR


def test_schema_dump_and_validate(tmp_path, capsys) -> None:
    index = write_json(tmp_path / "index.json", INDEX)
    checks = tmp_path / "checks.json"

    assert main(["schema-dump", index, "--format", "text", "--max-depth", "1"]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == [
        ".\tarray",
        ".[0]\tobject",
        ".[1]\tobject",
        ".[2]\tobject",
        ".[3]\tobject",
    ]

    assert main(["schema-dump", index]) == EXIT_OK
    dumped = json.loads(capsys.readouterr().out)
    assert dumped[2] == {"path": '.[0]["severity"]', "segments": [0, "severity"], "type": "string"}

    assert main(["schema-dump", index, "--script", "json", "-o", str(checks)]) == EXIT_OK
    assert main(["validate", str(checks), index]) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["failed"] == 0

    changed = [dict(r) for r in INDEX]
    changed[3]["message"] = None
    target = write_json(tmp_path / "changed.json", changed)

    assert main(["validate", str(checks), target]) == EXIT_NONCONFORMANT
    report = json.loads(capsys.readouterr().out)
    assert report["failures"] == [
        {"path": '.[3]["message"]', "expected": "string", "actual": "null"}
    ]

    assert main(["validate", "--reference", index, target]) == EXIT_NONCONFORMANT


def test_schema_dump_shell_script(tmp_path, capsys) -> None:
    index = write_json(tmp_path / "index.json", INDEX[:1])
    assert main(["schema-dump", index, "--script", "sh"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "check '.[0][\"severity\"]' string" in out


def test_jsonp(tmp_path, monkeypatch, capsys) -> None:
    index = write_json(tmp_path / "index.json", INDEX[:1])

    assert main(["jsonp", index, "--callback", "show"]) == EXIT_OK
    assert capsys.readouterr().out == 'show([{"severity":"[DEBUG]","message":"foo"}]);\n'

    monkeypatch.setenv("JQRECIPES_JSONP_CALLBACK", "fromEnv")
    assert main(["jsonp", index]) == EXIT_OK
    assert capsys.readouterr().out.startswith("fromEnv(")

    assert main(["jsonp", index, "--callback", "bad name"]) == EXIT_ERROR


def test_invalid_settings_exit_2(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("JQRECIPES_MAX_DEPTH", "lots")
    index = write_json(tmp_path / "index.json", INDEX)
    assert main(["schema-dump", index]) == EXIT_ERROR


def test_loggen(tmp_path) -> None:
    out = tmp_path / "random.log"
    assert main(["loggen", "-o", str(out), "--lines", "25", "--seed", "3"]) == EXIT_OK
    first = out.read_text()
    assert len(first.splitlines()) == 25

    assert main(["loggen", "-o", str(out), "--lines", "25", "--seed", "3"]) == EXIT_OK
    assert out.read_text() == first


def test_unwritable_output_is_an_error(tmp_path, capsys) -> None:
    index = write_json(tmp_path / "index.json", INDEX)
    target = tmp_path / "nodir" / "x.json"

    assert main(["diff", index, index, "-o", str(target)]) == EXIT_ERROR
    assert not target.exists()
    assert capsys.readouterr().out == ""


def test_deeply_nested_input_is_a_parse_error(tmp_path) -> None:
    deep = tmp_path / "deep.json"
    deep.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")

    assert main(["lint", str(deep)]) == EXIT_ERROR
    assert main(["diff", str(deep), str(deep)]) == EXIT_ERROR


@pytest.mark.parametrize("text", ["[NaN]", "[1, Infinity]", '{"a": -Infinity}'])
def test_lint_rejects_non_json_constants(tmp_path, text) -> None:
    path = tmp_path / "constants.json"
    path.write_text(text, encoding="utf-8")

    assert main(["lint", str(path)]) == EXIT_ERROR


def test_negative_max_depth_is_rejected(tmp_path, capsys) -> None:
    index = write_json(tmp_path / "index.json", INDEX)

    with pytest.raises(SystemExit) as exc:
        main(["schema-dump", index, "--max-depth", "-1"])
    assert exc.value.code == 2
    assert capsys.readouterr().out == ""


def test_stdin_input(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("[DEBUG] foo\n[ERROR] bar\n"))

    assert main(["to-json", "-", "--compact"]) == EXIT_OK
    assert capsys.readouterr().out == '["[DEBUG] foo","[ERROR] bar"]\n'

    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(INDEX)))
    assert main(["totals", "-", "--format", "text"]) == EXIT_OK
    assert capsys.readouterr().out == "1 [DEBUG]\n2 [ERROR]\n1 [INFO]\n"


def test_unreadable_stdin_is_an_error(monkeypatch) -> None:
    class BrokenStdin:
        def read(self):
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    monkeypatch.setattr("sys.stdin", BrokenStdin())
    assert main(["lint", "-"]) == EXIT_ERROR
