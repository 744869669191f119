# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Recursive merge of nested containers.

`merge_in(existing, incoming)` folds `incoming` into `existing` and returns
`existing`. Each container shape registers its own rule and nested values
dispatch again, so `dict[K, dict[K2, list[V]]]` merges all the way down:

  - dict: keys present on both sides merge recursively; new keys receive a
    fresh copy of the incoming value (never the incoming object itself)
  - list: incoming items are appended after the existing ones

Nothing is ever overwritten, and insertion order is preserved.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any


@singledispatch
def merge_in(existing: Any, incoming: Any) -> Any:
	raise TypeError(f"cannot merge values of type {type(existing).__name__}")


@merge_in.register
def _merge_dict(existing: dict, incoming: dict) -> dict:
	for key, value in incoming.items():
		if key in existing:
			merge_in(existing[key], value)
		else:
			existing[key] = merge_in(_empty_like(value), value)
	return existing


@merge_in.register
def _merge_list(existing: list, incoming: list) -> list:
	existing.extend(incoming)
	return existing


def _empty_like(value: Any) -> Any:
	if isinstance(value, (dict, list)):
		return type(value)()
	raise TypeError(f"cannot merge values of type {type(value).__name__}")


def merged(*parts: Any) -> Any:
	"""Merge `parts` left to right into a fresh container of the first's shape."""
	if not parts:
		raise ValueError("merged() needs at least one container")
	result = _empty_like(parts[0])
	for part in parts:
		merge_in(result, part)
	return result


__all__ = ["merge_in", "merged"]
