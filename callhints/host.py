# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hooking hints into failing calls.

Python has no global "no method matched" event, so functions opt in with the
`tracked` decorator. When a tracked call raises `TypeError`, the failure is
treated as a dispatch failure if either

- the exception is a `DispatchError` (hand-written dispatchers raise it when
  no implementation accepts the arguments), or
- the arguments do not bind to the function's signature.

For a dispatch failure, `report` builds an `Invocation`, lets the registry
render the matching hints into a buffer and attaches the text to the
exception as a note. The exception itself is re-raised unchanged.
"""

from __future__ import annotations

import functools
import inspect
import io
import sys
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from .errors import DispatchError
from .matcher import Invocation
from .parser import FunctionLike, signature_from_stub
from .registry import HintEntry, Registry, default_registry

F = TypeVar("F", bound=Callable[..., Any])


def is_dispatch_failure(
	exc: BaseException,
	function: Callable[..., Any],
	args: Sequence[Any],
	kwargs: Mapping[str, Any],
) -> bool:
	if isinstance(exc, DispatchError):
		return True
	if not isinstance(exc, TypeError):
		return False
	try:
		sig = inspect.signature(function)
	except (TypeError, ValueError):
		# builtins without introspectable signatures
		return False
	try:
		sig.bind(*args, **kwargs)
	except TypeError:
		return True
	return False


def report(
	exc: BaseException,
	function: Callable[..., Any],
	args: Sequence[Any] = (),
	kwargs: Optional[Mapping[str, Any]] = None,
	*,
	registry: Optional[Registry] = None,
) -> int:
	"""
	Attach the hints matching this failed call to `exc` as a note.

	Returns the number of hints that fired (0 leaves `exc` untouched).
	"""
	registry = registry if registry is not None else default_registry()
	invocation = Invocation.from_call(function, args, kwargs, keyword_check=registry.keyword_check)
	sink = io.StringIO()
	fired = registry.notify(invocation, sink)
	text = sink.getvalue().strip("\n")
	if fired and text:
		exc.add_note(text)
	return fired


def tracked(func: Optional[F] = None, *, registry: Optional[Registry] = None) -> Any:
	"""
	Decorator reporting dispatch failures of `func` to a registry.

	Usable bare (`@tracked`) or with arguments (`@tracked(registry=r)`). The
	default registry is looked up at failure time, not at decoration time.
	"""

	def decorate(fn: F) -> F:
		@functools.wraps(fn)
		def wrapper(*args: Any, **kwargs: Any) -> Any:
			try:
				return fn(*args, **kwargs)
			except TypeError as exc:
				if is_dispatch_failure(exc, fn, args, kwargs):
					report(exc, wrapper, args, kwargs, registry=registry)
				raise

		return wrapper  # type: ignore[return-value]

	if func is not None:
		return decorate(func)
	return decorate


def method_error_hint(
	pattern: str,
	message: str,
	*,
	registry: Optional[Registry] = None,
	function: FunctionLike = None,
	**style: Any,
) -> HintEntry:
	"""
	Register `message` for calls matching `pattern`.

	Names in `pattern` (the function and the types) are looked up in the
	caller's module globals when the hint is evaluated, so the pattern may
	mention things defined later in that module::

		method_error_hint("area(shape: str)", "area() takes a Shape, not its name", color="yellow")
	"""
	namespace = sys._getframe(1).f_globals
	registry = registry if registry is not None else default_registry()
	return registry.register(function, pattern, message, namespace=namespace, **style)


def hint_for(
	function: FunctionLike,
	message: str | Callable[..., Any],
	*,
	registry: Optional[Registry] = None,
	**style: Any,
) -> Callable[[F], F]:
	"""
	Decorator form: the decorated function is a stub whose parameters describe
	the call shape. The stub is returned unchanged and never called::

		@hint_for(area, "pass the radius by keyword")
		def _(shape: Circle, radius: float): ...
	"""

	def decorate(stub: F) -> F:
		target = registry if registry is not None else default_registry()
		target.register(None, signature_from_stub(stub, function=function), message, **style)
		return stub

	return decorate


__all__ = ["is_dispatch_failure", "report", "tracked", "method_error_hint", "hint_for"]
