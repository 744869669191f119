# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Mapping pass: destination union declaration -> ResolvedMappingModel.

Type-level `@from_union(...)` names the source unions (and optionally the
effect container); variant-level `@from_case(...)` names the source cases a
variant accepts. Variants without `@from_case` accept the same-named case of
every source. Problems are collected across the whole declaration and
raised together as one CompileError.
"""

from __future__ import annotations

import logging
from typing import Optional

from casemap.core import diagnostics as codes
from casemap.core.diagnostics import CompileError, Diagnostic
from casemap.core.merge import merge_in
from casemap.core.span import Span
from casemap.model import (
	AllSources,
	DestinationVariant,
	MappingFragment,
	NamedSource,
	ResolvedMappingModel,
	SourceUnionRef,
	SourceVariant,
)
from casemap.parser.ast import Directive, UnionDecl, VariantDecl

log = logging.getLogger(__name__)

FROM_UNION = "from_union"
FROM_CASE = "from_case"
EFFECT_CONTAINER = "effect_container"


class MappingParser:
	def __init__(self, decl: UnionDecl, *, file: Optional[str] = None) -> None:
		self.decl = decl
		self.file = file
		self.sources: list[str] = []
		self.effect_container: Optional[str] = None
		self.fragments: dict[DestinationVariant, MappingFragment] = {}
		self.order: dict[DestinationVariant, int] = {}
		self.diagnostics: list[Diagnostic] = []

	def parse(self) -> ResolvedMappingModel:
		for directive in self.decl.directives:
			self._visit_type_directive(directive)
		if not self.sources:
			self._error(
				f"union '{self.decl.name}' needs @{FROM_UNION}(Source, ...) naming at least one source union",
				codes.MISSING_SOURCE_DECLARATION,
				self.decl.loc,
			)
		for index, variant in enumerate(self.decl.variants):
			self._visit_variant(variant, index)

		if self.diagnostics:
			raise CompileError(self.diagnostics)

		log.debug(
			"mapped %s: %d variant(s) from %s",
			self.decl.name,
			len(self.order),
			", ".join(self.sources),
		)
		return ResolvedMappingModel(
			dest=self.decl.name,
			sources=tuple(self.sources),
			effect_container=self.effect_container,
			fragments=self.fragments,
			order=self.order,
			span=Span.from_loc(self.decl.loc, file=self.file),
		)

	def _visit_type_directive(self, directive: Directive) -> None:
		if directive.name == FROM_CASE:
			self._error(
				f"@{FROM_CASE} belongs on a variant, not on union '{self.decl.name}'",
				codes.MISPLACED_DIRECTIVE,
				directive.loc,
			)
			return
		if directive.name != FROM_UNION:
			self._unknown_directive(directive)
			return
		for arg in directive.args:
			if arg.key is None:
				if arg.value not in self.sources:
					self.sources.append(arg.value)
			elif arg.key == EFFECT_CONTAINER:
				self.effect_container = arg.value
			else:
				self._error(
					f"@{FROM_UNION} only accepts source unions and {EFFECT_CONTAINER} = Container, got '{arg.key}'",
					codes.UNKNOWN_OPTION,
					arg.loc or directive.loc,
				)

	def _visit_variant(self, variant: VariantDecl, index: int) -> None:
		dest = DestinationVariant(
			name=variant.name,
			shape=variant.shape,
			fields=variant.fields,
			index=index,
			span=Span.from_loc(variant.loc, file=self.file),
		)
		self.order[dest] = index

		fragment: MappingFragment = {}
		for directive in variant.directives:
			merge_in(fragment, self._case_fragment(variant, directive))
		if not fragment:
			fragment = {AllSources(): [SourceVariant(case_name=variant.name)]}

		merge_in(self.fragments, {dest: fragment})

	def _case_fragment(self, variant: VariantDecl, directive: Directive) -> MappingFragment:
		fragment: MappingFragment = {}
		if directive.name == FROM_UNION:
			self._error(
				f"@{FROM_UNION} belongs on the union, not on variant '{variant.name}'",
				codes.MISPLACED_DIRECTIVE,
				directive.loc,
			)
			return fragment
		if directive.name != FROM_CASE:
			self._unknown_directive(directive)
			return fragment
		for arg in directive.args:
			if "." in arg.value:
				self._error(
					f"expected a case name in @{FROM_CASE}, got '{arg.value}' (write Source = Case)",
					codes.SYNTAX,
					arg.loc or directive.loc,
				)
				continue
			src: SourceUnionRef = AllSources()
			if arg.key is not None:
				if arg.key not in self.sources:
					self._error(
						f"variant '{variant.name}' maps from '{arg.key}', which is not a source of '{self.decl.name}'",
						codes.UNKNOWN_SOURCE_UNION,
						variant.loc,
						notes=[f"declared sources: {', '.join(self.sources) or '(none)'}"],
					)
					continue
				src = NamedSource(arg.key)
			merge_in(fragment, {src: [SourceVariant(case_name=arg.value)]})
		return fragment

	def _unknown_directive(self, directive: Directive) -> None:
		self._error(
			f"unknown directive '@{directive.name}' (expected @{FROM_UNION} or @{FROM_CASE})",
			codes.UNKNOWN_DIRECTIVE,
			directive.loc,
		)

	def _error(self, message: str, code: str, loc: object | None, *, notes: list[str] | None = None) -> None:
		self.diagnostics.append(
			Diagnostic(
				message=message,
				code=code,
				phase="mapping",
				span=Span.from_loc(loc, file=self.file),
				notes=notes or [],
			)
		)


def build_mapping_model(decl: UnionDecl, *, file: Optional[str] = None) -> ResolvedMappingModel:
	"""Build the mapping model of one destination union; raises CompileError."""
	return MappingParser(decl, file=file).parse()


__all__ = ["MappingParser", "build_mapping_model", "FROM_UNION", "FROM_CASE", "EFFECT_CONTAINER"]
