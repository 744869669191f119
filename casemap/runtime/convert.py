# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Field-level conversions used by generated code.

Generated conversion functions never know how a field value becomes its
destination type; they ask a `ConverterRegistry`:

  - `into(value, target)`: unconditional. A registered converter wins;
    otherwise a value that already is a `target` is passed through and
    anything else is handed to `target(value)`.
  - `try_into(value, target)`: a fallible attempt. A registered fallible
    converter wins; otherwise the `into` path is used. Failure is always
    reported as `ConversionFailed`.
  - `into_effects` / `try_into_effects`: the same, with the result lifted
    into an effect container when the converter did not produce one itself.

Converters are keyed by (source type, target type); lookup walks the MRO of
the value's type, so a converter registered for `int` also serves `bool`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple

log = logging.getLogger(__name__)

Converter = Callable[[Any], Any]

# Exceptions that mean "this value does not fit the target" for try_into.
_FAILURES = (ValueError, TypeError, ArithmeticError)


class ConversionFailed(Exception):
	"""A fallible field conversion rejected its input."""

	def __init__(self, value: Any, target: Any, reason: str | None = None) -> None:
		self.value = value
		self.target = target
		self.reason = reason
		name = getattr(target, "__qualname__", repr(target))
		message = f"cannot convert {value!r} to {name}"
		if reason:
			message = f"{message}: {reason}"
		super().__init__(message)


class ExhaustedCandidatesError(AssertionError):
	"""
	No candidate accepted a source value.

	Raised by generated code when the declared mappings do not cover every
	runtime value of a source case. This is a schema bug, not a conversion
	failure callers are expected to handle.
	"""

	def __init__(self, value: Any, dest: str, case: str, tried: Tuple[str, ...] = ()) -> None:
		self.value = value
		self.dest = dest
		self.case = case
		self.tried = tried
		message = f"no variant of {dest} accepts {value!r} ({case})"
		if tried:
			message = f"{message}; tried {', '.join(tried)}"
		super().__init__(message)


class ConverterRegistry:
	def __init__(self) -> None:
		self._converters: Dict[Tuple[type, Any, bool], Converter] = {}

	def register(
		self,
		source: type,
		target: Any,
		fn: Optional[Converter] = None,
		*,
		fallible: bool = False,
	):
		"""
		Register `fn` converting `source` values to `target`.

		Usable directly or as a decorator. A fallible converter signals
		rejection by raising `ConversionFailed` (or ValueError/TypeError);
		it is only consulted by `try_into`.
		"""

		def deco(func: Converter) -> Converter:
			self._converters[(source, target, fallible)] = func
			return func

		if fn is not None:
			return deco(fn)
		return deco

	def lookup(self, source: type, target: Any, *, fallible: bool = False) -> Optional[Converter]:
		for klass in source.__mro__:
			fn = self._converters.get((klass, target, fallible))
			if fn is not None:
				return fn
		return None

	def into(self, value: Any, target: Any) -> Any:
		fn = self.lookup(type(value), target)
		if fn is not None:
			return fn(value)
		if isinstance(target, type) and isinstance(value, target):
			return value
		return target(value)

	def try_into(self, value: Any, target: Any) -> Any:
		fn = self.lookup(type(value), target, fallible=True)
		try:
			if fn is not None:
				return fn(value)
			return self.into(value, target)
		except ConversionFailed:
			raise
		except _FAILURES as err:
			log.debug("conversion of %r to %r failed: %s", value, target, err)
			raise ConversionFailed(value, target, str(err)) from err

	def into_effects(self, value: Any, target: Any, container: Any) -> Any:
		return _lift(self.into(value, target), container)

	def try_into_effects(self, value: Any, target: Any, container: Any) -> Any:
		return _lift(self.try_into(value, target), container)


def _lift(result: Any, container: Any) -> Any:
	if isinstance(result, container):
		return result
	return container.new(result, [])


def not_a_variant(value: Any, union: str) -> TypeError:
	return TypeError(f"expected a variant of {union}, got {type(value).__qualname__}")


default_registry = ConverterRegistry()


def converter(source: type, target: Any, fn: Optional[Converter] = None, *, fallible: bool = False):
	"""Register a converter on `default_registry`; see `ConverterRegistry.register`."""
	return default_registry.register(source, target, fn, fallible=fallible)


__all__ = [
	"ConversionFailed",
	"ExhaustedCandidatesError",
	"ConverterRegistry",
	"default_registry",
	"converter",
	"not_a_variant",
]
