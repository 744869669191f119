# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Schema front-end: lark grammar, AST dataclasses and the tree -> AST builder.
"""

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
from .parser import parse_schema

__all__ = [
	"Directive",
	"DirectiveArg",
	"FieldDecl",
	"FieldShape",
	"ImportDecl",
	"Located",
	"Schema",
	"UnionDecl",
	"VariantDecl",
	"parse_schema",
]
