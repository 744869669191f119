# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compile a schema and execute the generated code as an in-memory module.

This is what `casemapc` output would give after an import, without writing
a file. Names the schema refers to but does not import (field types, effect
containers, source unions from other modules) can be supplied through
`namespace`.
"""

from __future__ import annotations

import logging
import sys
import types
from typing import Any, Mapping, Optional

from casemap.config import CompileOptions
from casemap.pipeline import compile_schema
from casemap.runtime.convert import ConverterRegistry

log = logging.getLogger(__name__)


def load_schema(
	source: str,
	*,
	module_name: str = "casemap_generated",
	namespace: Optional[Mapping[str, Any]] = None,
	registry: Optional[ConverterRegistry] = None,
	file: Optional[str] = None,
	options: Optional[CompileOptions] = None,
	register: bool = False,
) -> types.ModuleType:
	"""
	Compile `source` and return the executed module.

	`registry` replaces the module's converter registry (the process-wide
	`default_registry` otherwise) and receives the module's conversions as
	field converters. With `register=True` the module is also placed in
	`sys.modules`, so other schemas can import it by name.
	"""
	result = compile_schema(source, file=file, options=options)
	module = types.ModuleType(module_name)
	module.__file__ = file or f"<casemap:{module_name}>"
	if namespace:
		module.__dict__.update(namespace)
	# The generated code carries its own future imports.
	code = compile(result.code, module.__file__, "exec", dont_inherit=True)
	# dataclasses resolves string annotations through sys.modules while the
	# classes are created, so the module is visible there during exec.
	previous = sys.modules.get(module_name)
	sys.modules[module_name] = module
	try:
		exec(code, module.__dict__)
	except BaseException:
		_restore(module_name, previous)
		raise
	if not register:
		_restore(module_name, previous)
	if registry is not None:
		module._registry = registry
		module.register_conversions(registry)
	log.debug("loaded %s (%d destination union(s))", module_name, len(result.plans))
	return module


def _restore(module_name: str, previous: Optional[types.ModuleType]) -> None:
	if previous is None:
		sys.modules.pop(module_name, None)
	else:
		sys.modules[module_name] = previous


__all__ = ["load_schema"]
