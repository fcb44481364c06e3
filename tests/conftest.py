import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("JQRECIPES_"):
            monkeypatch.delenv(name)


@pytest.fixture
def example_log_file(tmp_path):
    path = tmp_path / "example.log"
    path.write_text("[DEBUG] foo\n[ERROR] bar\n[ERROR] baz\n[INFO] boz\n", encoding="utf-8")
    return path
