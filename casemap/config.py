# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compiler options.

Options come from CLI flags; `CASEMAP_DUMP` additionally switches on the
diagnostic dump of generated code to `casemap_output.py` in the working
directory. The dump is for inspection only and never read back.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DUMP_ENV_VAR = "CASEMAP_DUMP"
DUMP_FILE_NAME = "casemap_output.py"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CompileOptions:
	# Where to write the diagnostic dump; None disables it.
	dump_path: Optional[Path] = None
	module_docstring: Optional[str] = None

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "CompileOptions":
		env = os.environ if environ is None else environ
		if "dump_path" not in overrides and env.get(DUMP_ENV_VAR, "").strip().lower() in _TRUTHY:
			overrides["dump_path"] = default_dump_path()
		return cls(**overrides)


def default_dump_path() -> Path:
	return Path.cwd() / DUMP_FILE_NAME


__all__ = ["CompileOptions", "DUMP_ENV_VAR", "DUMP_FILE_NAME", "default_dump_path"]
