# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Schema compilation pipeline: text -> Schema -> plans -> Python source.

Each destination union goes through mapping, resolve and check on its own;
diagnostics from all of them are gathered so one run reports every mistake
in the schema. Any error aborts emission: there is no partial output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from lark.exceptions import UnexpectedEOF, UnexpectedInput, UnexpectedToken

from casemap.checker import check_schema_names, check_sources
from casemap.config import CompileOptions
from casemap.core import diagnostics as codes
from casemap.core.diagnostics import CompileError, Diagnostic, raise_if_errors
from casemap.core.span import Span
from casemap.emitter import emit_module
from casemap.mapping import build_mapping_model
from casemap.model import ConversionPlan
from casemap.parser.ast import Schema
from casemap.parser.parser import parse_schema
from casemap.resolver import resolve

log = logging.getLogger(__name__)


@dataclass
class CompileResult:
	schema: Schema
	plans: List[ConversionPlan]
	code: str


def parse_or_diagnose(source: str, *, file: Optional[str] = None) -> Schema:
	"""Parse schema text, converting lark errors into an `E-SYNTAX` CompileError."""
	try:
		schema = parse_schema(source)
	except UnexpectedInput as err:
		raise CompileError([_syntax_diagnostic(err, source, file)]) from err
	raise_if_errors(check_schema_names(schema, file=file))
	return schema


def plan_schema(schema: Schema, *, file: Optional[str] = None) -> List[ConversionPlan]:
	"""Run mapping, resolve and check for every destination union."""
	diagnostics: List[Diagnostic] = []
	plans: List[ConversionPlan] = []
	for decl in schema.destinations:
		try:
			model = build_mapping_model(decl, file=file)
			plan = ConversionPlan(model=model, table=resolve(model))
		except CompileError as err:
			diagnostics.extend(err.diagnostics)
			continue
		problems = check_sources(plan, schema)
		if problems:
			diagnostics.extend(problems)
			continue
		plans.append(plan)
	raise_if_errors(diagnostics)
	return plans


def compile_schema(
	source: str,
	*,
	file: Optional[str] = None,
	options: Optional[CompileOptions] = None,
) -> CompileResult:
	"""
	Compile schema text into the source of a Python module.

	Raises CompileError carrying every diagnostic when the schema is invalid.
	"""
	options = options or CompileOptions()
	schema = parse_or_diagnose(source, file=file)
	plans = plan_schema(schema, file=file)
	code = emit_module(schema, plans, source_name=file, docstring=options.module_docstring)
	log.debug("compiled %s: %d union(s), %d destination(s)", file or "<schema>", len(schema.unions), len(plans))
	if options.dump_path is not None:
		options.dump_path.write_text(code)
		log.debug("wrote generated code to %s", options.dump_path)
	return CompileResult(schema=schema, plans=plans, code=code)


def _syntax_diagnostic(err: UnexpectedInput, source: str, file: Optional[str]) -> Diagnostic:
	line = getattr(err, "line", None)
	column = getattr(err, "column", None)
	if isinstance(err, UnexpectedEOF) or not isinstance(line, int) or line < 1:
		line, column = None, None
		message = "unexpected end of schema"
	elif isinstance(err, UnexpectedToken):
		if err.token.type == "$END":
			message = "unexpected end of schema"
		else:
			message = f"unexpected {err.token.type} '{err.token}'"
	else:
		message = "unexpected character"
	notes: List[str] = []
	expected = sorted(getattr(err, "expected", None) or getattr(err, "allowed", None) or [])
	if expected:
		notes.append(f"expected one of: {', '.join(expected)}")
	if line is not None and getattr(err, "pos_in_stream", None) is not None:
		notes.append(err.get_context(source).rstrip())
	return Diagnostic(
		message=message,
		code=codes.SYNTAX,
		phase="parser",
		span=Span(file=file, line=line, column=column, raw=err),
		notes=notes,
	)


__all__ = ["CompileResult", "compile_schema", "parse_or_diagnose", "plan_schema"]
