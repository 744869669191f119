# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
casemap: a compiler for union-to-union conversion schemas.

Stages:
  parser: schema text -> Schema AST (lark)
  mapping: destination union -> ResolvedMappingModel
  resolver: ResolvedMappingModel -> CandidateTable
  checker: CandidateTable vs. locally declared source unions
  emitter: CandidateTable -> Python source

The CLI entrypoint is `casemap.casemapc:main`; generated modules depend on
`casemap.runtime` only.
"""

__version__ = "0.3.0"

__all__ = ["core", "parser", "runtime"]
