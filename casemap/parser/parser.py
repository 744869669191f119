# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from .ast import (
	Directive,
	DirectiveArg,
	FieldDecl,
	FieldShape,
	ImportDecl,
	Located,
	Schema,
	UnionDecl,
	VariantDecl,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


def parse_schema(source: str) -> Schema:
	"""
	Parse schema text into a `Schema`.

	Raises `lark.exceptions.UnexpectedInput` on malformed input; the pipeline
	turns that into an `E-SYNTAX` diagnostic.
	"""
	tree = _PARSER.parse(source)
	return _build_schema(tree)


def _build_schema(tree: Tree) -> Schema:
	imports: list[ImportDecl] = []
	unions: list[UnionDecl] = []
	for child in tree.children:
		kind = _name(child)
		if kind == "import_stmt":
			imports.append(_build_import(child))
		elif kind == "from_import_stmt":
			imports.append(_build_from_import(child))
		elif kind == "union_def":
			unions.append(_build_union(child))
		else:
			raise TypeError(f"unexpected schema item {kind}")
	return Schema(imports=imports, unions=unions)


def _build_import(tree: Tree) -> ImportDecl:
	"""
	Grammar:
	  import_stmt: "import" dotted_name ("as" NAME)?
	"""
	module = _dotted(_child_tree(tree, "dotted_name"))
	alias_tok = next((c for c in tree.children if isinstance(c, Token) and c.type == "NAME"), None)
	return ImportDecl(module=module, alias=alias_tok.value if alias_tok else None, loc=_loc(tree))


def _build_from_import(tree: Tree) -> ImportDecl:
	"""
	Grammar:
	  from_import_stmt: "from" dotted_name "import" import_name ("," import_name)* ","?
	"""
	module = _dotted(_child_tree(tree, "dotted_name"))
	names: list[tuple[str, Optional[str]]] = []
	for node in _child_trees(tree, "import_name"):
		toks = [c.value for c in node.children if isinstance(c, Token)]
		names.append((toks[0], toks[1] if len(toks) > 1 else None))
	return ImportDecl(module=module, names=names, loc=_loc(tree))


def _build_union(tree: Tree) -> UnionDecl:
	"""
	Grammar:
	  union_def: directive* "union" NAME "{" variant* "}"
	"""
	name_tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "NAME")
	return UnionDecl(
		name=name_tok.value,
		variants=[_build_variant(v) for v in _child_trees(tree, "variant")],
		directives=[_build_directive(d) for d in _child_trees(tree, "directive")],
		loc=_loc(tree),
	)


def _build_variant(tree: Tree) -> VariantDecl:
	name_tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "NAME")
	shape = FieldShape.UNIT
	fields: list[FieldDecl] = []
	positional = _child_tree(tree, "positional_fields")
	named = _child_tree(tree, "named_fields")
	if positional is not None:
		shape = FieldShape.POSITIONAL
		for i, type_node in enumerate(_child_trees(positional, "type_ref")):
			fields.append(FieldDecl(name=None, type_name=_type_ref(type_node), index=i))
	elif named is not None:
		shape = FieldShape.NAMED
		for i, field_node in enumerate(_child_trees(named, "named_field")):
			fname = next(c for c in field_node.children if isinstance(c, Token) and c.type == "NAME")
			fields.append(
				FieldDecl(name=fname.value, type_name=_type_ref(_child_tree(field_node, "type_ref")), index=i)
			)
	return VariantDecl(
		name=name_tok.value,
		shape=shape,
		fields=tuple(fields),
		directives=[_build_directive(d) for d in _child_trees(tree, "directive")],
		loc=_loc(tree),
	)


def _build_directive(tree: Tree) -> Directive:
	"""
	Grammar:
	  directive: "@" NAME ("(" [directive_arg ("," directive_arg)* ","?] ")")?
	  directive_arg: dotted_name ("=" dotted_name)?
	"""
	name_tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "NAME")
	args: list[DirectiveArg] = []
	for arg_node in _child_trees(tree, "directive_arg"):
		parts = [_dotted(p) for p in _child_trees(arg_node, "dotted_name")]
		if len(parts) == 2:
			args.append(DirectiveArg(key=parts[0], value=parts[1], loc=_loc(arg_node)))
		else:
			args.append(DirectiveArg(value=parts[0], loc=_loc(arg_node)))
	return Directive(name=name_tok.value, args=args, loc=_loc(tree))


def _type_ref(tree: Tree) -> str:
	return _dotted(_child_tree(tree, "dotted_name"))


def _dotted(tree: Tree) -> str:
	return ".".join(tok.value for tok in tree.children if isinstance(tok, Token))


def _child_tree(tree: Tree, name: str) -> Optional[Tree]:
	return next((c for c in tree.children if isinstance(c, Tree) and _name(c) == name), None)


def _child_trees(tree: Tree, name: str) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and _name(c) == name]


def _loc(tree: Tree) -> Optional[Located]:
	meta = tree.meta
	if getattr(meta, "empty", True):
		return None
	return Located(line=meta.line, column=meta.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["parse_schema"]
