from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Located:
    line: int
    column: int


class FieldShape(Enum):
    """How a variant carries its fields."""

    UNIT = "unit"  # `Empty`
    POSITIONAL = "positional"  # `Case(str, int)`, including `Case()`
    NAMED = "named"  # `Case { a: str }`


@dataclass(frozen=True)
class FieldDecl:
    """One variant field; `name` is None for positional fields."""

    name: Optional[str]
    type_name: str
    index: int = 0

    @property
    def key(self) -> str:
        """Stable identifier: the field name, or the position for tuple-like fields."""
        return self.name if self.name is not None else str(self.index)

    @property
    def attr(self) -> str:
        """Attribute holding the field on a generated variant instance."""
        return self.name if self.name is not None else f"_{self.index}"


@dataclass
class DirectiveArg:
    """`value` or `key = value`; both sides are dotted names."""

    value: str
    key: Optional[str] = None
    loc: Optional[Located] = None


@dataclass
class Directive:
    name: str
    args: List[DirectiveArg]
    loc: Optional[Located] = None


@dataclass
class VariantDecl:
    name: str
    shape: FieldShape
    fields: Tuple[FieldDecl, ...]
    directives: List[Directive] = field(default_factory=list)
    loc: Optional[Located] = None

    @property
    def has_fields(self) -> bool:
        return bool(self.fields)


@dataclass
class UnionDecl:
    name: str
    variants: List[VariantDecl]
    directives: List[Directive] = field(default_factory=list)
    loc: Optional[Located] = None

    def variant(self, name: str) -> Optional[VariantDecl]:
        return next((v for v in self.variants if v.name == name), None)

    @property
    def is_destination(self) -> bool:
        """True when the union (or one of its variants) carries directives."""
        return bool(self.directives) or any(v.directives for v in self.variants)


@dataclass
class ImportDecl:
    """`import module [as alias]` or `from module import name [as alias], ...`."""

    module: str
    alias: Optional[str] = None
    names: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    loc: Optional[Located] = None

    @property
    def is_from(self) -> bool:
        return bool(self.names)


@dataclass
class Schema:
    imports: List[ImportDecl]
    unions: List[UnionDecl]

    def union(self, name: str) -> Optional[UnionDecl]:
        return next((u for u in self.unions if u.name == name), None)

    @property
    def destinations(self) -> List[UnionDecl]:
        return [u for u in self.unions if u.is_destination]


__all__ = [
    "Located",
    "FieldShape",
    "FieldDecl",
    "DirectiveArg",
    "Directive",
    "VariantDecl",
    "UnionDecl",
    "ImportDecl",
    "Schema",
]
