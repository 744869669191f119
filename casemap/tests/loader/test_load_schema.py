# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import dataclasses
import sys
import types

import pytest

from casemap.loader import load_schema
from casemap.runtime import ConverterRegistry

FIELDS = """
union Src {
	Pair(str, int)
	Rec { a: int }
}

@from_union(Src)
union Dest {
	Pair(str, int)
	Rec { a: int }
}
"""


def test_unions_with_fields_load_without_registering() -> None:
	mod = load_schema(FIELDS, module_name="casemap_loader_fields")
	assert "casemap_loader_fields" not in sys.modules
	assert [f.name for f in dataclasses.fields(mod.Src.Pair)] == ["_0", "_1"]
	assert mod.dest_from_src(mod.Src.Pair("x", 1)) == mod.Dest.Pair("x", 1)
	assert mod.dest_from_src(mod.Src.Rec(a=2)) == mod.Dest.Rec(a=2)


def test_existing_module_entry_is_restored(monkeypatch: pytest.MonkeyPatch) -> None:
	taken = types.ModuleType("casemap_loader_taken")
	monkeypatch.setitem(sys.modules, "casemap_loader_taken", taken)
	mod = load_schema(FIELDS, module_name="casemap_loader_taken")
	assert sys.modules["casemap_loader_taken"] is taken
	assert mod is not taken


def test_register_keeps_the_module(monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.delitem(sys.modules, "casemap_loader_kept", raising=False)
	mod = load_schema(FIELDS, module_name="casemap_loader_kept", register=True)
	try:
		assert sys.modules["casemap_loader_kept"] is mod
	finally:
		sys.modules.pop("casemap_loader_kept", None)


def test_failed_exec_leaves_no_module_behind() -> None:
	with pytest.raises(ModuleNotFoundError):
		load_schema(
			"import casemap_loader_no_such_module\nunion Src { A(int) }",
			module_name="casemap_loader_broken",
			register=True,
		)
	assert "casemap_loader_broken" not in sys.modules


def test_supplied_registry_receives_conversions() -> None:
	registry = ConverterRegistry()
	mod = load_schema(FIELDS, registry=registry)
	assert mod._registry is registry
	assert registry.lookup(mod.Src.Rec, mod.Dest) is mod.dest_from_src
	assert registry.into(mod.Src.Rec(a=3), mod.Dest) == mod.Dest.Rec(a=3)
