"""Unit tests for run output propagation."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from deployfeed.outputs import canonical_dumps, load_schema, set_output, validate_payload

if TYPE_CHECKING:
    from pathlib import Path


def test_canonical_dumps_is_single_line_and_sorted() -> None:
    assert canonical_dumps([{"b": 1, "a": "✅"}]) == '[{"a":"✅","b":1}]'


def test_set_output_appends_to_file(tmp_path: Path) -> None:
    path = tmp_path / "github_output"
    path.write_text("existing=1\n", encoding="utf-8")

    set_output("images", "[]", output_path=path)

    assert path.read_text(encoding="utf-8") == "existing=1\nimages=[]\n"


def test_set_output_multiline_uses_delimiter(tmp_path: Path) -> None:
    path = tmp_path / "github_output"

    set_output("body", "line one\nline two", output_path=path)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("body<<ghadelimiter_")
    assert lines[1:3] == ["line one", "line two"]
    assert lines[3] == lines[0].split("<<", 1)[1]


def test_set_output_reads_github_output_env(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "from_env"
    monkeypatch.setenv("GITHUB_OUTPUT", str(path))

    set_output("images", "[]")

    assert path.read_text(encoding="utf-8") == "images=[]\n"


def test_set_output_falls_back_to_stream(monkeypatch) -> None:
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    stream = io.StringIO()

    set_output("images", "[]", stream=stream)

    assert stream.getvalue() == "images=[]\n"


def test_validate_payload_accepts_results_and_failures() -> None:
    validate_payload(
        [
            {"env": "dev", "currentImageTag": "2.4.1", "releaseVersion": "2.4.2", "willBeReplaced": True},
            {"env": "sandbox", "error": "denied"},
        ]
    )


def test_validate_payload_rejects_unknown_environment() -> None:
    with pytest.raises(ValueError, match="Schema validation failed"):
        validate_payload([{"env": "staging", "error": "x"}])


def test_load_schema_unknown_name() -> None:
    assert load_schema("report")["type"] == "array"
    with pytest.raises(KeyError):
        load_schema("missing")
