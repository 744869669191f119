"""
casemap.core: shared spans, diagnostics and data utilities used across stages.

Modules:
  - span: best-effort source locations
  - diagnostics: Diagnostic, CompileError and diagnostic codes
  - merge: recursive merge of nested dict/list containers
  - logging: logger setup for the CLI
"""

__all__ = [
	"span",
	"diagnostics",
	"merge",
	"logging",
]
