# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""
callhints: attach hints to failed calls that match a declared call shape.

	from callhints import DispatchError, method_error_hint, tracked

	@tracked
	def area(shape, *, scale=1.0):
		if not isinstance(shape, Shape):
			raise DispatchError(f"no area() for {type(shape).__name__}")
		...

	method_error_hint("area(shape: str)", "area() takes a Shape; see Shape.from_name()")

Calling `area("circle")` still raises, and the traceback now ends with the
hint. Patterns use Python parameter syntax; see `callhints.parser`.
"""

from __future__ import annotations

import logging

from .config import HintConfig
from .errors import DispatchError, SignatureError
from .host import hint_for, is_dispatch_failure, method_error_hint, report, tracked
from .matcher import Invocation, KeywordComparison, matches
from .parser import parse_pattern, parse_signature, signature_from_stub
from .registry import HintEntry, Registry, default_registry, register, reset_default_registry
from .render import StyledMessage, printstyled
from .signature import KeywordParam, PositionalParam, Signature, VariadicPositional
from .types_env import FunctionRef, TypeRef

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
	"DispatchError",
	"FunctionRef",
	"HintConfig",
	"HintEntry",
	"Invocation",
	"KeywordComparison",
	"KeywordParam",
	"PositionalParam",
	"Registry",
	"Signature",
	"SignatureError",
	"StyledMessage",
	"TypeRef",
	"VariadicPositional",
	"default_registry",
	"hint_for",
	"is_dispatch_failure",
	"matches",
	"method_error_hint",
	"parse_pattern",
	"parse_signature",
	"printstyled",
	"register",
	"report",
	"reset_default_registry",
	"signature_from_stub",
	"tracked",
]
