# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Helpers for the union classes of generated modules.

A union is a plain base class; each variant is a frozen dataclass deriving
from it and reachable as `Union.Case`. Hand-written unions used as sources
must follow the same shape: variant classes as attributes of the union,
named fields as attributes, positional fields as `_0`, `_1`, ...
"""

from __future__ import annotations

from typing import Tuple


def attach_variant(union: type, variant: type, name: str) -> type:
	"""Expose `variant` as `union.<name>` with a matching qualified name."""
	variant.__name__ = name
	variant.__qualname__ = f"{union.__qualname__}.{name}"
	setattr(union, name, variant)
	variants = getattr(union, "__variants__", ())
	union.__variants__ = (*variants, name)
	return variant


def variants_of(union: type) -> Tuple[type, ...]:
	"""Variant classes of a generated union, in declaration order."""
	return tuple(getattr(union, name) for name in getattr(union, "__variants__", ()))


__all__ = ["attach_variant", "variants_of"]
