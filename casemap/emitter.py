# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Python source emission.

Turns a parsed schema plus one ConversionPlan per destination union into the
text of a Python module. Emission is a pure serialization of the resolved
tables; every decision about which candidates exist and in which order they
are tried was made by the resolver.

Shape of a conversion arm for a source case with candidates `L`:

  - `len(L) == 1`: every destination field is converted unconditionally
    (`_registry.into`) and the destination variant is returned.
  - `len(L) > 1`: candidates are attempted in order; each attempt converts
    all fields with `_registry.try_into` and returns on success. When every
    attempt fails the arm raises `ExhaustedCandidatesError`.

With an effect container, field conversions yield containers that are split
with `into_value_and_effects()`; the effects are concatenated in field order
and the result is built with `Container.compose_from(value, effects)`.

Every generated function is also registered as the field converter from its
source union to its destination union, so a field typed with another
destination union converts through that union's function and its effects
take that field's place in the composed list. Annotations are not
evaluated, so unions may refer to unions declared later in the schema.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Iterator, List, Optional

import casemap
from casemap.model import ConversionCandidate, ConversionPlan, DestinationVariant
from casemap.parser.ast import FieldDecl, FieldShape, Schema, UnionDecl
from casemap.resolver import fallible

_INDENT = "    "
_SOURCE_PARAM = "src"


class _Writer:
	def __init__(self) -> None:
		self.lines: List[str] = []
		self.depth = 0

	def line(self, text: str = "") -> None:
		self.lines.append(f"{_INDENT * self.depth}{text}" if text else "")

	def blank(self, count: int = 1) -> None:
		for _ in range(count):
			self.line()

	@contextmanager
	def indent(self) -> Iterator[None]:
		self.depth += 1
		try:
			yield
		finally:
			self.depth -= 1

	def text(self) -> str:
		return "\n".join(self.lines).rstrip() + "\n"


def snake_case(name: str) -> str:
	"""`inner.HttpSrc` -> `inner_http_src`."""
	parts = []
	for part in name.split("."):
		part = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", part)
		parts.append(part.lower())
	return "_".join(parts)


def function_name(dest: str, src: str) -> str:
	return f"{snake_case(dest)}_from_{snake_case(src)}"


def _variant_class_name(union: str, variant: str) -> str:
	return f"_{union}_{variant}"


def _local(fld: FieldDecl) -> str:
	return f"f_{fld.key}"


def emit_module(
	schema: Schema,
	plans: List[ConversionPlan],
	*,
	source_name: Optional[str] = None,
	docstring: Optional[str] = None,
) -> str:
	"""Render the whole generated module."""
	w = _Writer()
	origin = f" from {source_name}" if source_name else ""
	w.line(f"# Generated by casemap {casemap.__version__}{origin}. Do not edit.")
	w.line(f'"""{docstring or "Union types and conversions generated by casemap."}"""')
	w.blank()
	w.line("from __future__ import annotations")
	w.blank()
	w.line("from dataclasses import dataclass")
	w.blank()
	w.line("import casemap.runtime as _rt")
	if schema.imports:
		w.blank()
		for imp in schema.imports:
			if imp.is_from:
				names = ", ".join(f"{name} as {alias}" if alias else name for name, alias in imp.names)
				w.line(f"from {imp.module} import {names}")
			else:
				w.line(f"import {imp.module} as {imp.alias}" if imp.alias else f"import {imp.module}")
	w.blank()
	w.line("_registry = _rt.default_registry")

	exported: List[str] = []
	for union in schema.unions:
		_emit_union(w, union)
		exported.append(union.name)

	used_names: set[str] = set()
	conversions: List[tuple[str, str, str]] = []
	for plan in plans:
		exported.extend(_emit_plan(w, plan, schema, used_names, conversions))

	_emit_registration(w, conversions)
	exported.append("register_conversions")

	w.blank(2)
	w.line("__all__ = [")
	with w.indent():
		for name in exported:
			w.line(f'"{name}",')
	w.line("]")
	return w.text()


def _emit_union(w: _Writer, union: UnionDecl) -> None:
	w.blank(2)
	w.line(f"class {union.name}:")
	with w.indent():
		cases = ", ".join(v.name for v in union.variants) or "no variants"
		w.line(f'"""Union {union.name}: {cases}."""')
		w.blank()
		w.line("__slots__ = ()")
	for variant in union.variants:
		cls_name = _variant_class_name(union.name, variant.name)
		w.blank(2)
		w.line("@dataclass(frozen=True)")
		w.line(f"class {cls_name}({union.name}):")
		with w.indent():
			if not variant.fields:
				w.line("pass")
			for fld in variant.fields:
				w.line(f"{fld.attr}: {fld.type_name}")
	if union.variants:
		w.blank(2)
	for variant in union.variants:
		cls_name = _variant_class_name(union.name, variant.name)
		w.line(f'_rt.attach_variant({union.name}, {cls_name}, "{variant.name}")')


def _emit_plan(
	w: _Writer,
	plan: ConversionPlan,
	schema: Schema,
	used_names: set[str],
	conversions: List[tuple[str, str, str]],
) -> List[str]:
	model = plan.model
	container = model.effect_container
	names: List[str] = []
	if container is not None:
		w.blank(2)
		w.line(f"_rt.require_effect_container({container})")

	fn_by_src: dict[str, str] = {}
	for src, by_case in plan.table.items():
		fn_name = function_name(model.dest, src)
		base, n = fn_name, 2
		while fn_name in used_names:
			fn_name = f"{base}_{n}"
			n += 1
		used_names.add(fn_name)
		fn_by_src[src] = fn_name
		names.append(fn_name)
		conversions.append((src, model.dest, fn_name))

		target = f"{container}[{model.dest}]" if container else model.dest
		w.blank(2)
		w.line(f"def {fn_name}({_SOURCE_PARAM}):")
		with w.indent():
			w.line(f'"""Convert a {src} value into {target}."""')
			for case_name in _case_order(src, by_case, schema):
				w.line(f"if isinstance({_SOURCE_PARAM}, {src}.{case_name}):")
				with w.indent():
					_emit_arm(w, plan, src, case_name, by_case[case_name])
			w.line(f'raise _rt.not_a_variant({_SOURCE_PARAM}, "{src}")')

	dispatcher = f"_{snake_case(model.dest)}_from_source"
	w.blank(2)
	w.line(f"def {dispatcher}(value):")
	with w.indent():
		w.line(f'"""Convert a value of any source union of {model.dest}."""')
		for src, fn_name in fn_by_src.items():
			w.line(f"if isinstance(value, {src}):")
			with w.indent():
				w.line(f"return {fn_name}(value)")
		w.line(f'raise _rt.not_a_variant(value, "{" | ".join(fn_by_src) or model.dest}")')
	w.blank(2)
	w.line(f"{model.dest}.from_source = staticmethod({dispatcher})")
	return names


def _emit_registration(w: _Writer, conversions: List[tuple[str, str, str]]) -> None:
	w.blank(2)
	w.line("def register_conversions(registry):")
	with w.indent():
		w.line('"""Register the conversions of this module as field converters on `registry`."""')
		for src, dest, fn_name in conversions:
			w.line(f"registry.register({src}, {dest}, {fn_name})")
		if not conversions:
			w.line("pass")
	w.blank(2)
	w.line("register_conversions(_registry)")


def _case_order(src: str, by_case: dict, schema: Schema) -> List[str]:
	decl = schema.union(src)
	if decl is None:
		return list(by_case)
	ordered = [v.name for v in decl.variants if v.name in by_case]
	return ordered + [name for name in by_case if name not in ordered]


def _emit_arm(w: _Writer, plan: ConversionPlan, src: str, case_name: str, candidates: List[ConversionCandidate]) -> None:
	container = plan.model.effect_container
	if not fallible(candidates):
		cand = candidates[0]
		for fld in cand.dest.fields:
			read = f"{_SOURCE_PARAM}.{fld.attr}"
			if container:
				w.line(
					f"{_local(fld)}_value, {_local(fld)}_effects = "
					f"_registry.into_effects({read}, {fld.type_name}, {container}).into_value_and_effects()"
				)
			else:
				w.line(f"{_local(fld)} = _registry.into({read}, {fld.type_name})")
		_emit_return(w, plan, cand.dest)
		return

	for cand in candidates:
		w.line("try:")
		with w.indent():
			for fld in cand.dest.fields:
				read = f"{_SOURCE_PARAM}.{fld.attr}"
				if container:
					w.line(f"{_local(fld)} = _registry.try_into_effects({read}, {fld.type_name}, {container})")
				else:
					w.line(f"{_local(fld)} = _registry.try_into({read}, {fld.type_name})")
		w.line("except _rt.ConversionFailed:")
		with w.indent():
			w.line("pass")
		w.line("else:")
		with w.indent():
			if container:
				for fld in cand.dest.fields:
					w.line(f"{_local(fld)}_value, {_local(fld)}_effects = {_local(fld)}.into_value_and_effects()")
			_emit_return(w, plan, cand.dest)
	tried = ", ".join(f'"{plan.dest}.{c.dest.name}"' for c in candidates)
	w.line(
		f'raise _rt.ExhaustedCandidatesError({_SOURCE_PARAM}, "{plan.dest}", "{src}.{case_name}", ({tried},))'
	)


def _emit_return(w: _Writer, plan: ConversionPlan, dest: DestinationVariant) -> None:
	container = plan.model.effect_container
	suffix = "_value" if container else ""
	if dest.shape is FieldShape.NAMED:
		args = ", ".join(f"{fld.name}={_local(fld)}{suffix}" for fld in dest.fields)
	else:
		args = ", ".join(f"{_local(fld)}{suffix}" for fld in dest.fields)
	value = f"{plan.dest}.{dest.name}({args})"
	if not container:
		w.line(f"return {value}")
		return
	effects = ", ".join(f"*{_local(fld)}_effects" for fld in dest.fields)
	w.line(f"value = {value}")
	w.line(f"return {container}.compose_from(value, [{effects}])")


__all__ = ["emit_module", "function_name", "snake_case"]
