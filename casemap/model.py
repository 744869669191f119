# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Mapping model shared by the mapping, resolve, check and emit passes.

A destination union is described by a `ResolvedMappingModel`: which source
unions feed it, the optional effect container, and for each destination
variant a `MappingFragment` saying which source cases it accepts. The
resolver flattens that into a `CandidateTable`, the only input of the
emitter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from casemap.core.span import Span
from casemap.parser.ast import FieldDecl, FieldShape


@dataclass(frozen=True)
class NamedSource:
	"""One specific source union, by the dotted path it was declared with."""

	path: str

	def __str__(self) -> str:
		return self.path


@dataclass(frozen=True)
class AllSources:
	"""Wildcard: every source union declared on the destination."""

	def __str__(self) -> str:
		return "*"


SourceUnionRef = Union[NamedSource, AllSources]


@dataclass(frozen=True)
class SourceVariant:
	case_name: str
	# Fallibility is decided structurally by the resolver, never declared.
	fallible: bool = False


@dataclass(frozen=True)
class DestinationVariant:
	name: str
	shape: FieldShape
	fields: Tuple[FieldDecl, ...]
	index: int
	span: Span = field(default_factory=Span, compare=False, hash=False)

	@property
	def has_fields(self) -> bool:
		return bool(self.fields)


MappingFragment = Dict[SourceUnionRef, List[SourceVariant]]


@dataclass
class ResolvedMappingModel:
	dest: str
	sources: Tuple[str, ...]
	effect_container: Optional[str]
	fragments: Dict[DestinationVariant, MappingFragment]
	order: Dict[DestinationVariant, int]
	span: Span = field(default_factory=Span)

	@property
	def variants(self) -> List[DestinationVariant]:
		return sorted(self.order, key=self.order.__getitem__)


@dataclass(frozen=True)
class ConversionCandidate:
	"""`source` of some source union may become destination variant `dest`."""

	source: SourceVariant
	dest: DestinationVariant


# source union path -> source case name -> candidates in try order
CandidateTable = Dict[str, Dict[str, List[ConversionCandidate]]]


@dataclass
class ConversionPlan:
	"""Everything the emitter needs for one destination union."""

	model: ResolvedMappingModel
	table: CandidateTable

	@property
	def dest(self) -> str:
		return self.model.dest


__all__ = [
	"NamedSource",
	"AllSources",
	"SourceUnionRef",
	"SourceVariant",
	"DestinationVariant",
	"MappingFragment",
	"ResolvedMappingModel",
	"ConversionCandidate",
	"CandidateTable",
	"ConversionPlan",
]
