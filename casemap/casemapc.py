# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`casemapc`: compile a casemap schema into a Python module.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from casemap.config import CompileOptions, default_dump_path
from casemap.core.diagnostics import CompileError
from casemap.core.logging import configure_logging
from casemap.pipeline import compile_schema
from casemap.printer import format_plans

log = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
	"""
	Parse, resolve and emit one schema file.

	With --json, prints `{"exit_code", "diagnostics"}` to stdout; otherwise
	diagnostics go to stderr as `file:line:col: severity: message`. Generated
	code goes to --output, or to stdout when no output path is given.
	"""
	parser = argparse.ArgumentParser(prog="casemapc", description="Compile a casemap schema into Python conversions")
	parser.add_argument("source", type=Path, help="Path to the schema file")
	parser.add_argument("-o", "--output", type=Path, help="Write the generated module to this path")
	parser.add_argument(
		"--emit-table",
		type=Path,
		help="Write the resolved candidate tables to the given path",
	)
	parser.add_argument(
		"--dump",
		action="store_true",
		help="Also write the generated module to ./casemap_output.py (same as CASEMAP_DUMP=1)",
	)
	parser.add_argument("--docstring", type=str, default=None, help="Docstring for the generated module")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/code/message/severity/file/line/column)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress to stderr")
	args = parser.parse_args(argv)

	configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING, force=True)

	source_path: Path = args.source
	overrides: dict = {"module_docstring": args.docstring}
	if args.dump:
		overrides["dump_path"] = default_dump_path()
	options = CompileOptions.from_env(**overrides)

	try:
		source = source_path.read_text()
	except OSError as err:
		msg = f"cannot read schema: {err.strerror or err}"
		if args.json:
			print(json.dumps({"exit_code": 1, "diagnostics": [_io_diag(msg, source_path)]}))
		else:
			print(f"{source_path}:?:?: error: {msg}", file=sys.stderr)
		return 1

	try:
		result = compile_schema(source, file=str(source_path), options=options)
	except CompileError as err:
		if args.json:
			payload = {
				"exit_code": 1,
				"diagnostics": [d.to_json(str(source_path)) for d in err.diagnostics],
			}
			print(json.dumps(payload))
		else:
			for d in err.diagnostics:
				print(d.format(str(source_path)), file=sys.stderr)
				for note in d.notes:
					print(f"  note: {note}", file=sys.stderr)
		return 1

	if args.emit_table:
		args.emit_table.write_text(format_plans(result.plans))
	if args.output:
		args.output.write_text(result.code)
		log.info("wrote %s", args.output)
	elif not args.json:
		sys.stdout.write(result.code)
	if args.json:
		print(json.dumps({"exit_code": 0, "diagnostics": []}))
	return 0


def _io_diag(msg: str, source_path: Path) -> dict:
	return {
		"phase": "driver",
		"code": None,
		"message": msg,
		"severity": "error",
		"file": str(source_path),
		"line": None,
		"column": None,
		"notes": [],
	}


__all__ = ["main"]
