# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""
Lazy references into the host (Python) type system.

A pattern is usually registered at import time, often before the classes and
functions it mentions exist (forward references, optional modules, or plain
typos). `TypeRef` and `FunctionRef` therefore keep the *name* plus the
namespace to look it up in, and resolve on every query. Resolution is total:
anything that cannot be turned into a class (or a callable) is reported as
unresolved, and every comparison against an unresolved reference is False.

Eager references (`TypeRef.of(int)`, `FunctionRef.of(func)`) are used by the
stub front end and by callers that already hold the objects.
"""

from __future__ import annotations

import builtins
import inspect
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

_MISSING = object()

# Annotation names that `builtins` lacks or binds to a non-class (`None`).
_FALLBACK_NAMES: Mapping[str, Any] = {
	"Any": Any,
	"None": type(None),
}


def _lookup_dotted(dotted: str, namespace: Optional[Mapping[str, Any]]) -> Any:
	"""
	Look `dotted` up in `namespace`, then the fallback names, then `builtins`.

	Returns `_MISSING` when any segment is absent. The namespace is indexed
	(not probed with `in`) so mapping types with `__missing__` can supply
	names on demand.
	"""
	head, _, tail = dotted.partition(".")
	obj: Any = _MISSING
	if namespace is not None:
		try:
			obj = namespace[head]
		except KeyError:
			obj = _MISSING
	if obj is _MISSING:
		obj = _FALLBACK_NAMES.get(head, _MISSING)
	if obj is _MISSING:
		obj = getattr(builtins, head, _MISSING)
	if obj is _MISSING or not tail:
		return obj
	for attr in tail.split("."):
		obj = getattr(obj, attr, _MISSING)
		if obj is _MISSING:
			return _MISSING
	return obj


def _is_type_target(obj: Any) -> bool:
	if obj is Any:
		return True
	return isinstance(obj, type) and not _is_generic_alias(obj)


def _is_generic_alias(obj: Any) -> bool:
	# `list[int]` is an instance of types.GenericAlias, which passes
	# isinstance(obj, type) on some interpreters but rejects issubclass.
	return getattr(obj, "__origin__", None) is not None and getattr(obj, "__args__", None) is not None


@dataclass(frozen=True)
class TypeRef:
	"""
	Reference to a type constraint: one or more alternatives (`A | B`).

	`text` is the source form used for display and equality; `names` holds the
	dotted names of a lazy reference, `targets` the classes of an eager one.
	"""

	text: str
	names: Tuple[str, ...] = ()
	namespace: Optional[Mapping[str, Any]] = field(default=None, compare=False, repr=False)
	targets: Optional[Tuple[Any, ...]] = field(default=None, compare=False, repr=False)

	@classmethod
	def of(cls, *types: Any) -> "TypeRef":
		if not types:
			raise ValueError("TypeRef.of() needs at least one type")
		for t in types:
			if not _is_type_target(t):
				raise TypeError(f"not a class: {t!r}")
		text = " | ".join(_type_display_name(t) for t in types)
		return cls(text=text, targets=tuple(types))

	@classmethod
	def lazy(cls, names: Tuple[str, ...] | list[str] | str, namespace: Optional[Mapping[str, Any]] = None) -> "TypeRef":
		if isinstance(names, str):
			names = tuple(part.strip() for part in names.split("|"))
		names = tuple(names)
		if not names or any(not n for n in names):
			raise ValueError(f"empty type name in {names!r}")
		return cls(text=" | ".join(names), names=names, namespace=namespace)

	@property
	def is_lazy(self) -> bool:
		return self.targets is None

	def resolve(self) -> Optional[Tuple[Any, ...]]:
		"""Return the classes this reference denotes, or None if any alternative is unresolved."""
		if self.targets is not None:
			return self.targets
		resolved = []
		for name in self.names:
			try:
				obj = _lookup_dotted(name, self.namespace)
			except Exception:
				# Lookups run arbitrary __getattr__ hooks; a failing hook means the
				# name is unusable right now, not that the failure path should break.
				logger.debug("type name %r raised during resolution", name, exc_info=True)
				return None
			if obj is _MISSING or not _is_type_target(obj):
				return None
			resolved.append(obj)
		return tuple(resolved)

	@property
	def is_resolved(self) -> bool:
		return self.resolve() is not None

	def is_subtype(self, actual: Any) -> bool:
		"""`actual` (a class) is a subclass of one of the alternatives."""
		targets = self.resolve()
		if targets is None:
			return False
		if _accepts_everything(targets):
			return True
		try:
			return issubclass(actual, targets)
		except Exception:
			# non-class `actual`, or a metaclass __subclasscheck__ that raises
			logger.debug("subclass check of %r against %s raised", actual, self.text, exc_info=True)
			return False

	def is_instance(self, value: Any) -> bool:
		"""`value` is an instance of one of the alternatives."""
		targets = self.resolve()
		if targets is None:
			return False
		if _accepts_everything(targets):
			return True
		try:
			return isinstance(value, targets)
		except Exception:
			logger.debug("instance check against %s raised", self.text, exc_info=True)
			return False

	def __str__(self) -> str:
		return self.text


def _accepts_everything(targets: Tuple[Any, ...]) -> bool:
	return any(t is Any or t is object for t in targets)


def _type_display_name(t: Any) -> str:
	if t is Any:
		return "Any"
	if t is type(None):
		return "None"
	module = getattr(t, "__module__", None)
	qualname = getattr(t, "__qualname__", None) or getattr(t, "__name__", repr(t))
	if module in (None, "builtins"):
		return qualname
	return f"{module}.{qualname}"


def is_subtype(actual: Any, constraint: Optional[TypeRef]) -> bool:
	"""Subtype check where `None` means unconstrained."""
	return constraint is None or constraint.is_subtype(actual)


def is_instance(value: Any, constraint: Optional[TypeRef]) -> bool:
	"""Instance check where `None` means unconstrained."""
	return constraint is None or constraint.is_instance(value)


def function_identity(fn: Any) -> Any:
	"""
	Canonical object a callable stands for.

	Bound methods collapse to their function and `functools.wraps` chains are
	followed, so a decorated function and the function it wraps compare equal.
	"""
	fn = getattr(fn, "__func__", fn)
	try:
		return inspect.unwrap(fn)
	except ValueError:
		# __wrapped__ cycle
		return fn


def same_function(a: Any, b: Any) -> bool:
	if a is b:
		return True
	try:
		return function_identity(a) is function_identity(b)
	except Exception:
		logger.debug("could not unwrap %r / %r", a, b, exc_info=True)
		return False


def function_key(fn: Any) -> Optional[str]:
	"""Short name used to bucket registry entries (`__name__` of the unwrapped callable)."""
	try:
		name = getattr(function_identity(fn), "__name__", None)
	except Exception:
		return None
	return name if isinstance(name, str) else None


def _lookup_in_modules(dotted: str) -> Any:
	"""
	Resolve `pkg.mod.attr` or `pkg.mod:Qual.name` against already-imported modules.

	Never imports: a module that was not loaded yet simply does not resolve.
	"""
	if ":" in dotted:
		module_name, _, qualname = dotted.partition(":")
		module = sys.modules.get(module_name)
		if module is None:
			return _MISSING
		return _lookup_dotted(qualname, vars(module))
	parts = dotted.split(".")
	for cut in range(len(parts) - 1, 0, -1):
		module = sys.modules.get(".".join(parts[:cut]))
		if module is None:
			continue
		obj: Any = module
		for attr in parts[cut:]:
			obj = getattr(obj, attr, _MISSING)
			if obj is _MISSING:
				return _MISSING
		return obj
	return getattr(builtins, dotted, _MISSING)


@dataclass(frozen=True)
class FunctionRef:
	"""
	Reference to the function a signature applies to.

	Lazy references resolve `name` in `namespace` (typically the registering
	module's globals); without a namespace, in `sys.modules`.
	"""

	name: str
	namespace: Optional[Mapping[str, Any]] = field(default=None, compare=False, repr=False)
	target: Any = field(default=None, compare=False, repr=False)

	@classmethod
	def of(cls, fn: Callable[..., Any]) -> "FunctionRef":
		if not callable(fn):
			raise TypeError(f"not callable: {fn!r}")
		name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)
		return cls(name=name, target=fn)

	@classmethod
	def lazy(cls, name: str, namespace: Optional[Mapping[str, Any]] = None) -> "FunctionRef":
		if not name:
			raise ValueError("empty function name")
		return cls(name=name, namespace=namespace)

	@property
	def is_lazy(self) -> bool:
		return self.target is None

	@property
	def key(self) -> Optional[str]:
		"""Bucket key, or None when only resolution can tell (lazy references may be aliases)."""
		if self.target is None:
			return None
		return function_key(self.target)

	def resolve(self) -> Optional[Callable[..., Any]]:
		if self.target is not None:
			return self.target
		try:
			if self.namespace is not None:
				obj = _lookup_dotted(self.name, self.namespace)
			else:
				obj = _lookup_in_modules(self.name)
		except Exception:
			logger.debug("function name %r raised during resolution", self.name, exc_info=True)
			return None
		if obj is _MISSING or not callable(obj):
			return None
		return obj

	def denotes(self, fn: Any) -> bool:
		resolved = self.resolve()
		if resolved is None:
			return False
		return same_function(resolved, fn)

	def __str__(self) -> str:
		return self.name


__all__ = [
	"TypeRef",
	"FunctionRef",
	"is_subtype",
	"is_instance",
	"function_identity",
	"same_function",
	"function_key",
]
