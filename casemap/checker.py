# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Static checks that need the whole schema.

- `check_schema_names`: duplicate union, variant and field names.
- `check_sources`: for source unions declared in the same schema, every
  referenced case must exist, every candidate must be able to read its
  destination fields from the source variant, and every source case must
  have at least one candidate (generated conversions are total).

Sources imported from Python modules are opaque here; the generated code
rejects non-variants with a TypeError at runtime instead.
"""

from __future__ import annotations

from typing import Optional

from casemap.core import diagnostics as codes
from casemap.core.diagnostics import Diagnostic
from casemap.core.span import Span
from casemap.model import ConversionCandidate, ConversionPlan
from casemap.parser.ast import FieldShape, Schema, VariantDecl


def check_schema_names(schema: Schema, *, file: Optional[str] = None) -> list[Diagnostic]:
	diagnostics: list[Diagnostic] = []

	def dup(message: str, loc: object | None) -> None:
		diagnostics.append(
			Diagnostic(message=message, code=codes.DUPLICATE_NAME, phase="parser", span=Span.from_loc(loc, file=file))
		)

	seen_unions: set[str] = set()
	for union in schema.unions:
		if union.name in seen_unions:
			dup(f"union '{union.name}' is declared more than once", union.loc)
		seen_unions.add(union.name)
		seen_variants: set[str] = set()
		for variant in union.variants:
			if variant.name in seen_variants:
				dup(f"variant '{union.name}.{variant.name}' is declared more than once", variant.loc)
			seen_variants.add(variant.name)
			seen_fields: set[str] = set()
			for fld in variant.fields:
				if fld.name is None:
					continue
				if fld.name in seen_fields:
					dup(f"field '{fld.name}' of '{union.name}.{variant.name}' is declared more than once", variant.loc)
				seen_fields.add(fld.name)
	return diagnostics


def check_sources(plan: ConversionPlan, schema: Schema) -> list[Diagnostic]:
	diagnostics: list[Diagnostic] = []
	for src, by_case in plan.table.items():
		decl = schema.union(src)
		if decl is None:
			continue
		for case_name, candidates in by_case.items():
			src_variant = decl.variant(case_name)
			if src_variant is None:
				for dest in _distinct_dests(candidates):
					diagnostics.append(
						Diagnostic(
							message=f"'{plan.dest}.{dest.name}' maps from '{src}.{case_name}', but '{src}' has no such case",
							code=codes.UNKNOWN_CASE,
							phase="check",
							span=dest.span,
							notes=[f"cases of '{src}': {', '.join(v.name for v in decl.variants) or '(none)'}"],
						)
					)
				continue
			for cand in candidates:
				problem = _shape_problem(cand, src_variant)
				if problem is not None:
					diagnostics.append(
						Diagnostic(
							message=f"cannot convert '{src}.{case_name}' into '{plan.dest}.{cand.dest.name}': {problem}",
							code=codes.FIELD_SHAPE,
							phase="check",
							span=cand.dest.span,
						)
					)
		missing = [v.name for v in decl.variants if v.name not in by_case]
		if missing:
			diagnostics.append(
				Diagnostic(
					message=f"conversion from '{src}' into '{plan.dest}' does not cover: {', '.join(missing)}",
					code=codes.NON_EXHAUSTIVE,
					phase="check",
					span=plan.model.span,
					notes=["add @from_case directives or same-named variants for the missing cases"],
				)
			)
	return diagnostics


def _distinct_dests(candidates: list[ConversionCandidate]):
	seen = []
	for cand in candidates:
		if cand.dest not in seen:
			seen.append(cand.dest)
	return seen


def _shape_problem(cand: ConversionCandidate, src_variant: VariantDecl) -> Optional[str]:
	for fld in cand.dest.fields:
		if fld.name is not None:
			if src_variant.shape is not FieldShape.NAMED:
				return f"field '{fld.name}' needs a source variant with named fields"
			if all(s.name != fld.name for s in src_variant.fields):
				return f"source variant has no field '{fld.name}'"
		else:
			if src_variant.shape is not FieldShape.POSITIONAL:
				return f"positional field {fld.index} needs a source variant with positional fields"
			if fld.index >= len(src_variant.fields):
				return f"source variant has {len(src_variant.fields)} positional field(s), need at least {fld.index + 1}"
	return None


__all__ = ["check_schema_names", "check_sources"]
