"""
Common diagnostic structure for the parser, mapping, resolve and check passes.

Passes never stop at the first problem: they append Diagnostics to a list
and raise a single CompileError carrying all of them once the pass is done.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .span import Span

# Diagnostic codes.
SYNTAX = "E-SYNTAX"
DUPLICATE_NAME = "E-DUPLICATE-NAME"
MISSING_SOURCE_DECLARATION = "E-MISSING-SOURCE"
UNKNOWN_SOURCE_UNION = "E-UNKNOWN-SOURCE"
UNKNOWN_DIRECTIVE = "E-UNKNOWN-DIRECTIVE"
UNKNOWN_OPTION = "E-UNKNOWN-OPTION"
MISPLACED_DIRECTIVE = "E-MISPLACED-DIRECTIVE"
AMBIGUOUS_UNIT_VARIANT = "E-AMBIGUOUS-UNIT-VARIANT"
UNKNOWN_CASE = "E-UNKNOWN-CASE"
FIELD_SHAPE = "E-FIELD-SHAPE"
NON_EXHAUSTIVE = "E-NON-EXHAUSTIVE"


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Pass that produced the diagnostic: parser, mapping, resolve or check.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def format(self, default_file: str | None = None) -> str:
		"""Render as `file:line:col: severity: message`."""
		file = self.span.file or default_file or "<schema>"
		return f"{file}:{self.span.short()}: {self.severity}: {self.message}"

	def to_json(self, default_file: str | None = None) -> dict:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file or default_file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


class CompileError(Exception):
	"""
	Compound failure of one or more compiler passes.

	Carries every error diagnostic found; the message lists them all so a
	bare traceback is still useful.
	"""

	def __init__(self, diagnostics: Iterable[Diagnostic]) -> None:
		self.diagnostics: list[Diagnostic] = list(diagnostics)
		super().__init__("\n".join(d.format() for d in self.diagnostics) or "compilation failed")

	@property
	def codes(self) -> list[str | None]:
		return [d.code for d in self.diagnostics]


def raise_if_errors(diagnostics: list[Diagnostic]) -> None:
	errors = [d for d in diagnostics if d.severity == "error"]
	if errors:
		raise CompileError(errors)


__all__ = [
	"Diagnostic",
	"CompileError",
	"raise_if_errors",
	"SYNTAX",
	"DUPLICATE_NAME",
	"MISSING_SOURCE_DECLARATION",
	"UNKNOWN_SOURCE_UNION",
	"UNKNOWN_DIRECTIVE",
	"UNKNOWN_OPTION",
	"MISPLACED_DIRECTIVE",
	"AMBIGUOUS_UNIT_VARIANT",
	"UNKNOWN_CASE",
	"FIELD_SHAPE",
	"NON_EXHAUSTIVE",
]
