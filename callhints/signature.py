# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""
Validated call shapes.

A `Signature` is what a hint is registered against: the function it applies
to, the positional parameters (each optionally constrained to a type), an
optional trailing variadic positional group, the keyword parameters (with a
required/default status) and whether unknown keywords are tolerated.

Signatures are immutable. Structural invariants (one variadic group, always
last) are encoded in the shape of the value; name uniqueness is checked on
construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .errors import SignatureError
from .types_env import FunctionRef, TypeRef

ANONYMOUS = "_"


@dataclass(frozen=True)
class PositionalParam:
	name: str = ANONYMOUS
	constraint: Optional[TypeRef] = None

	def render(self) -> str:
		if self.constraint is None:
			return self.name
		return f"{self.name}: {self.constraint}"


@dataclass(frozen=True)
class VariadicPositional:
	"""`*args`: zero or more trailing positional arguments, each checked against `element_constraint`."""

	name: str = "args"
	element_constraint: Optional[TypeRef] = None

	def render(self) -> str:
		if self.element_constraint is None:
			return f"*{self.name}"
		return f"*{self.name}: {self.element_constraint}"


@dataclass(frozen=True)
class KeywordParam:
	"""
	A named parameter supplied by keyword at the call site.

	`required` is True iff the declaration had no default. `default` keeps the
	default's source text (display only; defaults are never evaluated).
	"""

	name: str
	constraint: Optional[TypeRef] = None
	required: bool = True
	default: Optional[str] = None

	def render(self) -> str:
		out = self.name
		if self.constraint is not None:
			out = f"{out}: {self.constraint}"
		if not self.required:
			default = self.default if self.default is not None else "..."
			out = f"{out} = {default}" if self.constraint is not None else f"{out}={default}"
		return out


@dataclass(frozen=True)
class Signature:
	function_ref: FunctionRef
	positionals: Tuple[PositionalParam, ...] = ()
	variadic_positional: Optional[VariadicPositional] = None
	keywords: Tuple[KeywordParam, ...] = ()
	variadic_keywords: bool = False
	_keyword_index: Dict[str, KeywordParam] = field(init=False, repr=False, compare=False, hash=False)

	def __post_init__(self) -> None:
		# Accept lists from callers; store tuples so the value stays immutable.
		object.__setattr__(self, "positionals", tuple(self.positionals))
		object.__setattr__(self, "keywords", tuple(self.keywords))
		seen: set[str] = set()
		for p in self.positionals:
			if p.name == ANONYMOUS:
				continue
			if p.name in seen:
				raise SignatureError(f"duplicate parameter name '{p.name}'")
			seen.add(p.name)
		if self.variadic_positional is not None:
			if self.variadic_positional.name in seen:
				raise SignatureError(f"duplicate parameter name '{self.variadic_positional.name}'")
			seen.add(self.variadic_positional.name)
		index: Dict[str, KeywordParam] = {}
		for kw in self.keywords:
			if kw.name in index or kw.name in seen:
				raise SignatureError(f"duplicate parameter name '{kw.name}'")
			index[kw.name] = kw
		object.__setattr__(self, "_keyword_index", index)

	@property
	def name(self) -> str:
		return self.function_ref.name

	@property
	def arity(self) -> int:
		"""Number of fixed positional parameters."""
		return len(self.positionals)

	@property
	def required_keywords(self) -> Tuple[KeywordParam, ...]:
		return tuple(kw for kw in self.keywords if kw.required)

	def keyword(self, name: str) -> Optional[KeywordParam]:
		return self._keyword_index.get(name)

	def accepts_arity(self, count: int) -> bool:
		if self.variadic_positional is None:
			return count == len(self.positionals)
		return count >= len(self.positionals)

	def render(self) -> str:
		"""Pattern-syntax form, e.g. `foo(x: int, *args, z: str = "a", **kwargs)`."""
		parts = [p.render() for p in self.positionals]
		if self.variadic_positional is not None:
			parts.append(self.variadic_positional.render())
		elif self.keywords:
			parts.append("*")
		parts.extend(kw.render() for kw in self.keywords)
		if self.variadic_keywords:
			parts.append("**kwargs")
		return f"{self.function_ref.name}({', '.join(parts)})"

	def __str__(self) -> str:
		return self.render()


__all__ = [
	"ANONYMOUS",
	"PositionalParam",
	"VariadicPositional",
	"KeywordParam",
	"Signature",
]
