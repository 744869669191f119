# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Runtime support imported by generated modules.

Generated code uses `ConverterRegistry` for field conversions, raises
`ExhaustedCandidatesError` when fallible candidates run out, and builds
results through an effect container implementing `WithEffects`.
"""

from .convert import (
	ConversionFailed,
	ConverterRegistry,
	ExhaustedCandidatesError,
	converter,
	default_registry,
	not_a_variant,
)
from .effects import Effectful, WithEffects, require_effect_container
from .unions import attach_variant, variants_of

__all__ = [
	"ConversionFailed",
	"ConverterRegistry",
	"ExhaustedCandidatesError",
	"converter",
	"default_registry",
	"not_a_variant",
	"Effectful",
	"WithEffects",
	"require_effect_container",
	"attach_variant",
	"variants_of",
]
