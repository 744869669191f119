# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass

import pytest

from casemap.runtime import (
	ConversionFailed,
	ConverterRegistry,
	Effectful,
	ExhaustedCandidatesError,
	not_a_variant,
)


@dataclass(frozen=True)
class U8:
	value: int

	def __post_init__(self) -> None:
		if not 0 <= self.value < 256:
			raise ValueError(f"{self.value} does not fit in 8 bits")


def test_into_falls_back_to_constructor_and_identity() -> None:
	reg = ConverterRegistry()
	assert reg.into("12", int) == 12
	value = U8(3)
	assert reg.into(value, U8) is value


def test_registered_converter_wins() -> None:
	reg = ConverterRegistry()

	@reg.register(str, int)
	def _parse(text: str) -> int:
		return int(text, 16)

	assert reg.into("ff", int) == 255


def test_lookup_walks_the_mro() -> None:
	reg = ConverterRegistry()
	reg.register(int, str, lambda v: f"int:{v}")
	assert reg.lookup(bool, str) is not None
	assert reg.into(True, str) == "int:True"
	assert reg.lookup(bool, str, fallible=True) is None


def test_try_into_wraps_value_errors() -> None:
	reg = ConverterRegistry()
	assert reg.try_into(100, U8) == U8(100)
	with pytest.raises(ConversionFailed) as info:
		reg.try_into(300, U8)
	assert info.value.value == 300
	assert info.value.target is U8
	assert "8 bits" in str(info.value)
	assert isinstance(info.value.__cause__, ValueError)


def test_try_into_prefers_fallible_converter() -> None:
	reg = ConverterRegistry()
	reg.register(int, int, lambda v: v * 2)

	@reg.register(int, int, fallible=True)
	def _only_small(v: int) -> int:
		if v > 10:
			raise ConversionFailed(v, int, "too large")
		return v

	assert reg.into(5, int) == 10
	assert reg.try_into(5, int) == 5
	with pytest.raises(ConversionFailed, match="too large"):
		reg.try_into(11, int)


def test_effect_results_are_lifted() -> None:
	reg = ConverterRegistry()
	reg.register(str, str, lambda v: Effectful.new(v.upper(), [f"upper {v}"]))
	lifted = reg.into_effects(7, int, Effectful)
	assert lifted == Effectful(7, ())
	produced = reg.into_effects("a", str, Effectful)
	value, effects = produced.into_value_and_effects()
	assert value == "A"
	assert list(effects) == ["upper a"]
	with pytest.raises(ConversionFailed):
		reg.try_into_effects(999, U8, Effectful)


def test_error_messages() -> None:
	err = ExhaustedCandidatesError(300, "Dest", "Src.C1", ("C1", "C2"))
	assert isinstance(err, AssertionError)
	assert str(err) == "no variant of Dest accepts 300 (Src.C1); tried C1, C2"
	assert str(not_a_variant(3, "Src")) == "expected a variant of Src, got int"
