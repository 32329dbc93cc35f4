# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""
Error types shared by the pattern parser, the registry and the host hook.

Two domains exist:
- registration time: `SignatureError`, raised immediately to whoever tries to
  register a malformed pattern (nothing is stored in that case);
- call time: `DispatchError`, raised by user code (hand-written dispatchers)
  to say "no method accepts these arguments". The matcher itself never raises.
"""

from __future__ import annotations

from typing import Optional

from .pattern_ast import Located


class SignatureError(ValueError):
	"""
	User-facing error for call patterns that cannot become a `Signature`.

	Carries a best-effort location (`loc`, 1-based line/column inside the
	pattern text) and the pattern itself so the CLI can render a diagnostic
	that points at the offending parameter.
	"""

	def __init__(self, message: str, *, loc: Optional[Located] = None, pattern: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		self.loc = loc
		self.pattern = pattern

	def __str__(self) -> str:
		if self.pattern is None:
			return self.message
		if self.loc is None:
			return f"{self.message} (in `{self.pattern}`)"
		return f"{self.message} (in `{self.pattern}` at {self.loc.line}:{self.loc.column})"

	def with_pattern(self, pattern: str) -> "SignatureError":
		"""Return a copy attached to `pattern` (keeps an already-known pattern)."""
		if self.pattern is not None:
			return self
		return SignatureError(self.message, loc=self.loc, pattern=pattern)


class DispatchError(TypeError):
	"""Raised by a dispatcher when no implementation accepts the given arguments."""


__all__ = ["SignatureError", "DispatchError"]
