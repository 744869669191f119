# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from casemap.casemapc import main as casemapc_main

BASIC = """union Src {
	Case1()
	Case2()
}

@from_union(Src)
union Dest {
	Case1()
	@from_case(Case2)
	MyCase2()
}
"""

MISSING_SOURCE = """union Dest {
	@from_case(X)
	A
}
"""


def _write_file(path: Path, content: str) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(content)
	return path


def _run_casemapc_json(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, dict]:
	rc = casemapc_main(argv + ["--json"])
	out = capsys.readouterr().out
	payload = json.loads(out) if out.strip() else {}
	return rc, payload


def test_writes_module_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "basic.cmap", BASIC)
	rc = casemapc_main([str(src)])
	out = capsys.readouterr().out
	assert rc == 0
	assert out.startswith("# Generated by casemap ")
	assert "def dest_from_src(src):" in out


def test_output_and_table_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "basic.cmap", BASIC)
	out_path = tmp_path / "gen" / "basic_conv.py"
	out_path.parent.mkdir()
	table_path = tmp_path / "basic.table"
	rc, payload = _run_casemapc_json(
		[str(src), "-o", str(out_path), "--emit-table", str(table_path), "--docstring", "Basic."],
		capsys,
	)
	assert rc == 0
	assert payload == {"exit_code": 0, "diagnostics": []}
	assert '"""Basic."""' in out_path.read_text()
	assert table_path.read_text() == (
		"dest Dest <- Src {\n"
		"  Src:\n"
		"    Case1 => into #0 Case1()\n"
		"    Case2 => into #1 MyCase2()\n"
		"}\n"
	)


def test_fallible_table(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(
		tmp_path / "fallible.cmap",
		"""@from_union(FallibleSrc, effect_container = Effectful)
union FallibleDest {
	@from_case(C1)
	C1(U8)
	@from_case(C1)
	C2 { wide: U16 }
}
""",
	)
	table_path = tmp_path / "fallible.table"
	rc, _ = _run_casemapc_json([str(src), "-o", str(tmp_path / "out.py"), "--emit-table", str(table_path)], capsys)
	assert rc == 0
	assert table_path.read_text() == (
		"dest FallibleDest <- FallibleSrc with Effectful {\n"
		"  FallibleSrc:\n"
		"    C1 => try #0 C1(U8) | #1 C2 { wide: U16 }\n"
		"}\n"
	)


def test_errors_as_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "broken.cmap", MISSING_SOURCE)
	rc, payload = _run_casemapc_json([str(src)], capsys)
	assert rc == 1
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["code"] == "E-MISSING-SOURCE"
	assert diag["phase"] == "mapping"
	assert diag["file"] == str(src)
	assert diag["line"] == 1


def test_syntax_error_as_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "syntax.cmap", "union Src {\n\tCase1(\n}\n")
	rc, payload = _run_casemapc_json([str(src)], capsys)
	assert rc == 1
	(diag,) = payload["diagnostics"]
	assert diag["code"] == "E-SYNTAX"
	assert diag["phase"] == "parser"
	assert diag["line"] == 3


def test_errors_on_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "broken.cmap", MISSING_SOURCE)
	out_path = tmp_path / "never.py"
	rc = casemapc_main([str(src), "-o", str(out_path)])
	captured = capsys.readouterr()
	assert rc == 1
	assert captured.out == ""
	assert captured.err.startswith(f"{src}:1:1: error: ")
	assert not out_path.exists()


def test_unreadable_source(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	missing = tmp_path / "nope.cmap"
	rc, payload = _run_casemapc_json([str(missing)], capsys)
	assert rc == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "driver"
	assert diag["message"].startswith("cannot read schema")


def test_dump_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.chdir(tmp_path)
	monkeypatch.delenv("CASEMAP_DUMP", raising=False)
	src = _write_file(tmp_path / "basic.cmap", BASIC)
	out_path = tmp_path / "basic_conv.py"
	rc, _ = _run_casemapc_json([str(src), "-o", str(out_path)], capsys)
	assert rc == 0
	assert not (tmp_path / "casemap_output.py").exists()
	rc, _ = _run_casemapc_json([str(src), "-o", str(out_path), "--dump"], capsys)
	assert rc == 0
	assert (tmp_path / "casemap_output.py").read_text() == out_path.read_text()


def test_dump_env_var(tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.chdir(tmp_path)
	monkeypatch.setenv("CASEMAP_DUMP", "1")
	src = _write_file(tmp_path / "basic.cmap", BASIC)
	rc, _ = _run_casemapc_json([str(src)], capsys)
	assert rc == 0
	assert "def dest_from_src(src):" in (tmp_path / "casemap_output.py").read_text()
