# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from casemap.runtime import Effectful, WithEffects, attach_variant, require_effect_container, variants_of


class Logged(WithEffects):
	def __init__(self, value, lines) -> None:
		self.value = value
		self.lines = lines

	@classmethod
	def new(cls, value, effects):
		return cls(value, list(effects))

	def into_value_and_effects(self):
		return self.value, iter(self.lines)


class DuckContainer:
	@classmethod
	def new(cls, value, effects):
		return cls()

	def into_value_and_effects(self):
		return None, iter(())

	@classmethod
	def compose_from(cls, value, effects):
		return cls()


def test_compose_from_defaults_to_new() -> None:
	out = Logged.compose_from("v", iter(["a", "b"]))
	assert isinstance(out, Logged)
	assert (out.value, out.lines) == ("v", ["a", "b"])


def test_effects_iterator_is_single_use() -> None:
	_, effects = Effectful.new(1, ["x", "y"]).into_value_and_effects()
	assert list(effects) == ["x", "y"]
	assert list(effects) == []


def test_require_effect_container() -> None:
	assert require_effect_container(Effectful) is Effectful
	assert require_effect_container(DuckContainer) is DuckContainer
	with pytest.raises(TypeError, match="must be a class"):
		require_effect_container(Effectful(1))
	with pytest.raises(TypeError, match="missing: new, into_value_and_effects, compose_from"):
		require_effect_container(object)


def test_attach_variant() -> None:
	class Shape:
		pass

	class _Circle(Shape):
		pass

	class _Square(Shape):
		pass

	attach_variant(Shape, _Circle, "Circle")
	attach_variant(Shape, _Square, "Square")
	assert Shape.Circle is _Circle
	assert _Circle.__qualname__.endswith("Shape.Circle")
	assert variants_of(Shape) == (_Circle, _Square)
