# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""
Signature matching for failed calls.

`matches(signature, invocation)` is a pure predicate. All of the following
must hold for a match:

1. the invocation's function is the signature's function (an unresolved
   function reference never matches);
2. positional arity is exact, or at least the fixed count when the signature
   has `*args`;
3. each fixed positional argument type is a subclass of its constraint;
4. each extra positional argument type is a subclass of the `*args` element
   constraint;
5. every keyword declared without a default is present;
6. every keyword supplied is declared (and passes its constraint), unless the
   signature has `**kwargs`.

Unresolved type constraints fail their check; nothing here raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple

from .signature import Signature
from .types_env import TypeRef, function_key, is_instance, is_subtype


class KeywordComparison(Enum):
	"""
	What keyword entries of an `Invocation` carry, and how they are compared.

	INSTANCE: entries hold the argument values (`isinstance` check).
	SUBTYPE: entries hold the argument types (`issubclass` check).

	Picked once per registry from configuration, never per call.
	"""

	INSTANCE = "instance"
	SUBTYPE = "subtype"

	def capture(self, value: Any) -> Any:
		"""What a host stores in an invocation for a keyword argument `value`."""
		if self is KeywordComparison.SUBTYPE:
			return type(value)
		return value

	def check(self, entry: Any, constraint: Optional[TypeRef]) -> bool:
		if self is KeywordComparison.SUBTYPE:
			return is_subtype(entry, constraint)
		return is_instance(entry, constraint)


@dataclass(frozen=True)
class Invocation:
	"""
	Descriptor of one failed call: the function called, the runtime types of
	the positional arguments, and the keyword arguments as (name, value) or
	(name, type) pairs depending on the `KeywordComparison` in force.
	"""

	function: Any
	positional_types: Tuple[Any, ...] = ()
	keywords: Tuple[Tuple[str, Any], ...] = ()

	@classmethod
	def from_call(
		cls,
		function: Callable[..., Any],
		args: Sequence[Any] = (),
		kwargs: Optional[Mapping[str, Any]] = None,
		*,
		keyword_check: KeywordComparison = KeywordComparison.INSTANCE,
	) -> "Invocation":
		kwargs = kwargs or {}
		return cls(
			function=function,
			positional_types=tuple(type(arg) for arg in args),
			keywords=tuple((name, keyword_check.capture(value)) for name, value in kwargs.items()),
		)

	@classmethod
	def of_types(
		cls,
		function: Any,
		positional_types: Iterable[Any] = (),
		keywords: Optional[Mapping[str, Any]] = None,
	) -> "Invocation":
		return cls(
			function=function,
			positional_types=tuple(positional_types),
			keywords=tuple((keywords or {}).items()),
		)

	@property
	def keyword_names(self) -> Tuple[str, ...]:
		return tuple(name for name, _ in self.keywords)

	@property
	def key(self) -> Optional[str]:
		return function_key(self.function)


def matches(
	signature: Signature,
	invocation: Invocation,
	*,
	keyword_check: KeywordComparison = KeywordComparison.INSTANCE,
) -> bool:
	if not signature.function_ref.denotes(invocation.function):
		return False
	return positionals_match(signature, invocation.positional_types) and keywords_match(
		signature, invocation.keywords, keyword_check=keyword_check
	)


def positionals_match(signature: Signature, positional_types: Sequence[Any]) -> bool:
	if not signature.accepts_arity(len(positional_types)):
		return False
	fixed = len(signature.positionals)
	for param, actual in zip(signature.positionals, positional_types):
		if not is_subtype(actual, param.constraint):
			return False
	if signature.variadic_positional is not None:
		element = signature.variadic_positional.element_constraint
		return all(is_subtype(actual, element) for actual in positional_types[fixed:])
	return True


def keywords_match(
	signature: Signature,
	keywords: Iterable[Tuple[str, Any]],
	*,
	keyword_check: KeywordComparison = KeywordComparison.INSTANCE,
) -> bool:
	supplied = set()
	for name, entry in keywords:
		supplied.add(name)
		declared = signature.keyword(name)
		if declared is None:
			if not signature.variadic_keywords:
				return False
			continue
		if not keyword_check.check(entry, declared.constraint):
			return False
	return all(kw.name in supplied for kw in signature.required_keywords)


__all__ = [
	"KeywordComparison",
	"Invocation",
	"matches",
	"positionals_match",
	"keywords_match",
]
