# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Effect containers.

A container pairs the result of a conversion with an ordered list of
effects produced while converting (log lines, events to publish, ...).
Generated conversions only ever build, split and recombine containers; they
never inspect effects.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, Iterator, List, Tuple, TypeVar

V = TypeVar("V")
E = TypeVar("E")


class WithEffects(ABC, Generic[V, E]):
	"""Contract for any class named as `effect_container` in a schema."""

	@classmethod
	@abstractmethod
	def new(cls, value: V, effects: List[E]) -> "WithEffects[V, E]":
		"""Create a container holding `value` and `effects`."""

	@abstractmethod
	def into_value_and_effects(self) -> Tuple[V, Iterator[E]]:
		"""Split into the value and a single-use iterator over the effects."""

	@classmethod
	def compose_from(cls, value: V, composed_effects: Iterable[E]) -> "WithEffects[V, E]":
		"""Create a container from already concatenated effects; defaults to `new`."""
		return cls.new(value, list(composed_effects))


@dataclass(frozen=True)
class Effectful(WithEffects[V, E]):
	"""Plain container usable as `effect_container = casemap.runtime.Effectful`."""

	value: V
	effects: Tuple[E, ...] = field(default_factory=tuple)

	@classmethod
	def new(cls, value: V, effects: List[E]) -> "Effectful[V, E]":
		return cls(value, tuple(effects))

	def into_value_and_effects(self) -> Tuple[V, Iterator[E]]:
		return self.value, iter(self.effects)


def require_effect_container(container: Any) -> Any:
	"""
	Validate an effect container at import time of a generated module.

	Subclasses of WithEffects pass; other classes must provide the same three
	operations.
	"""
	if not isinstance(container, type):
		raise TypeError(f"effect container must be a class, got {container!r}")
	if issubclass(container, WithEffects):
		return container
	missing = [name for name in ("new", "into_value_and_effects", "compose_from") if not callable(getattr(container, name, None))]
	if missing:
		raise TypeError(
			f"effect container {container.__qualname__} does not implement WithEffects (missing: {', '.join(missing)})"
		)
	return container


__all__ = ["WithEffects", "Effectful", "require_effect_container"]
