# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax tree of a call pattern, as produced by the Lark front end.

This is deliberately dumb: it records what was written (names, annotations,
default text, markers) in source order. Placement rules and the split into
positional/keyword groups are applied later when the tree is lowered into a
`callhints.signature.Signature`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


@dataclass(frozen=True)
class Located:
	line: int
	column: int


@dataclass
class TypeName:
	"""One alternative of a type expression: a dotted name, maybe subscripted."""

	name: str
	args: List["TypeExpr"] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class TypeExpr:
	"""`A | B | C`; a plain annotation has a single alternative."""

	alternatives: List[TypeName]
	loc: Optional[Located] = None

	def render(self) -> str:
		parts = []
		for alt in self.alternatives:
			if alt.args:
				inner = ", ".join(arg.render() for arg in alt.args)
				parts.append(f"{alt.name}[{inner}]")
			else:
				parts.append(alt.name)
		return " | ".join(parts)


class ParamKind(Enum):
	PLAIN = auto()  # name[: T][= default]
	VAR_POSITIONAL = auto()  # *name[: T]
	KEYWORD_MARKER = auto()  # bare *
	POSITIONAL_MARKER = auto()  # /
	VAR_KEYWORD = auto()  # **name[: T]


@dataclass
class PatternParam:
	kind: ParamKind
	loc: Located
	name: Optional[str] = None
	annotation: Optional[TypeExpr] = None
	default: Optional[str] = None


@dataclass
class PatternCall:
	name: str
	params: List[PatternParam]
	loc: Located
	type_params: List[str] = field(default_factory=list)
	type_params_loc: Optional[Located] = None


__all__ = ["Located", "TypeName", "TypeExpr", "ParamKind", "PatternParam", "PatternCall"]
