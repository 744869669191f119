# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Candidate resolution: ResolvedMappingModel -> CandidateTable.

Every (source union, source case) pair gets the list of destination
variants it may become. `AllSources` entries are expanded to each declared
source here and never reach the table. Lists are ordered by destination
declaration index, which is the order fallible conversions are attempted
in, so users control precedence by where they declare a variant.
"""

from __future__ import annotations

import logging

from casemap.core import diagnostics as codes
from casemap.core.diagnostics import CompileError, Diagnostic
from casemap.core.merge import merge_in
from casemap.model import (
	AllSources,
	CandidateTable,
	ConversionCandidate,
	DestinationVariant,
	NamedSource,
	ResolvedMappingModel,
)

log = logging.getLogger(__name__)


def resolve(model: ResolvedMappingModel) -> CandidateTable:
	"""
	Build the candidate table for `model`.

	Raises CompileError (`E-AMBIGUOUS-UNIT-VARIANT`) when a fieldless
	destination variant would have to be chosen by a fallible attempt:
	with no fields there is nothing to attempt.
	"""
	# Seed in declaration order so table iteration order is deterministic.
	table: CandidateTable = {src: {} for src in model.sources}
	for dest, fragment in model.fragments.items():
		for src_ref, src_cases in fragment.items():
			by_case: dict[str, list[ConversionCandidate]] = {}
			for case in src_cases:
				merge_in(by_case, {case.case_name: [ConversionCandidate(source=case, dest=dest)]})
			if isinstance(src_ref, AllSources):
				targets = list(model.sources)
			elif isinstance(src_ref, NamedSource):
				targets = [src_ref.path]
			else:
				raise TypeError(f"unexpected source reference {src_ref!r}")
			for src in targets:
				merge_in(table, {src: by_case})

	for by_case in table.values():
		for candidates in by_case.values():
			# Stable: candidates for the same destination keep insertion order.
			candidates.sort(key=lambda cand: model.order.get(cand.dest, 0))

	_check_unit_ambiguity(model, table)
	log.debug(
		"resolved %s: %s",
		model.dest,
		", ".join(f"{src}({len(by_case)} case(s))" for src, by_case in table.items()),
	)
	return table


def _check_unit_ambiguity(model: ResolvedMappingModel, table: CandidateTable) -> None:
	diagnostics: list[Diagnostic] = []
	reported: set[DestinationVariant] = set()
	for src, by_case in table.items():
		for case_name, candidates in by_case.items():
			if len(candidates) < 2:
				continue
			for cand in candidates:
				if cand.dest.has_fields or cand.dest in reported:
					continue
				reported.add(cand.dest)
				others = [f"{model.dest}.{c.dest.name}" for c in candidates if c is not cand]
				diagnostics.append(
					Diagnostic(
						message=(
							f"variant '{model.dest}.{cand.dest.name}' has no fields but competes with "
							f"{', '.join(others)} for '{src}.{case_name}'; there is nothing to attempt a conversion on"
						),
						code=codes.AMBIGUOUS_UNIT_VARIANT,
						phase="resolve",
						span=cand.dest.span,
					)
				)
	if diagnostics:
		raise CompileError(diagnostics)


def fallible(candidates: list[ConversionCandidate]) -> bool:
	"""A case with more than one candidate is resolved by fallible attempts."""
	return len(candidates) > 1


__all__ = ["resolve", "fallible"]
