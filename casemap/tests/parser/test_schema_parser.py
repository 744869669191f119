# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest
from lark.exceptions import UnexpectedInput

from casemap.parser import FieldShape, parse_schema


def test_parses_variant_shapes() -> None:
	schema = parse_schema(
		"""
union Src {
	Case1()
	Case2(str, int,)
	Case3 { a: str, b: decimal.Decimal }
	Empty
}
"""
	)
	assert [u.name for u in schema.unions] == ["Src"]
	src = schema.unions[0]
	assert [v.name for v in src.variants] == ["Case1", "Case2", "Case3", "Empty"]
	case1, case2, case3, empty = src.variants
	assert case1.shape is FieldShape.POSITIONAL and case1.fields == ()
	assert case2.shape is FieldShape.POSITIONAL
	assert [(f.name, f.type_name, f.attr) for f in case2.fields] == [(None, "str", "_0"), (None, "int", "_1")]
	assert case3.shape is FieldShape.NAMED
	assert [(f.name, f.type_name) for f in case3.fields] == [("a", "str"), ("b", "decimal.Decimal")]
	assert empty.shape is FieldShape.UNIT
	assert not src.is_destination


def test_parses_directives_on_union_and_variants() -> None:
	schema = parse_schema(
		"""
# destination
@from_union(Src, inner.Src, effect_container = Effectful)
union Dest {
	@from_case(inner.Src = C1, Src = Case1)
	@from_case(Other)
	Case1(str),
	MyCase2(),
}
"""
	)
	dest = schema.union("Dest")
	assert dest is not None and dest.is_destination
	(from_union,) = dest.directives
	assert from_union.name == "from_union"
	assert [(a.key, a.value) for a in from_union.args] == [
		(None, "Src"),
		(None, "inner.Src"),
		("effect_container", "Effectful"),
	]
	case1 = dest.variant("Case1")
	assert [d.name for d in case1.directives] == ["from_case", "from_case"]
	assert [(a.key, a.value) for a in case1.directives[0].args] == [("inner.Src", "C1"), ("Src", "Case1")]
	assert [(a.key, a.value) for a in case1.directives[1].args] == [(None, "Other")]
	assert dest.variant("MyCase2").directives == []
	assert dest.loc is not None and dest.loc.line == 3


def test_from_case_alone_marks_a_destination() -> None:
	schema = parse_schema(
		"""
union Dest {
	@from_case(Other)
	Case1
}
"""
	)
	assert schema.destinations == schema.unions


def test_parses_imports() -> None:
	schema = parse_schema(
		"""
import decimal
import app.fields as fields
from app.effects import Effectful, Log as L,
"""
	)
	plain, aliased, from_import = schema.imports
	assert (plain.module, plain.alias, plain.is_from) == ("decimal", None, False)
	assert (aliased.module, aliased.alias) == ("app.fields", "fields")
	assert from_import.is_from
	assert from_import.module == "app.effects"
	assert from_import.names == [("Effectful", None), ("Log", "L")]


def test_empty_directive_arguments() -> None:
	schema = parse_schema(
		"""
@from_union(Src)
union Dest {
	@from_case()
	A
	@marker
	B
}
"""
	)
	dest = schema.unions[0]
	assert dest.variant("A").directives[0].args == []
	assert dest.variant("B").directives[0].name == "marker"


@pytest.mark.parametrize(
	"source",
	[
		"union Src { Case1( }",
		"union { A }",
		"union Src { A(str) B { a } }",
		"@from_union(Src = = X) union D { A }",
		"union Src { A } extra",
	],
)
def test_rejects_malformed_schemas(source: str) -> None:
	with pytest.raises(UnexpectedInput):
		parse_schema(source)
