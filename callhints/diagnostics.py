# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic records for the command-line front end.

A `Diagnostic` is a message plus a best-effort location inside a pattern
(`Span`). Library code raises `SignatureError`; the CLI converts those into
diagnostics so they can be printed for humans or emitted as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import SignatureError


@dataclass(frozen=True)
class Span:
	"""Source location (`file` names the pattern, e.g. `<pattern 1>`); Span() is unknown."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		return cls(file=file, line=getattr(loc, "line", None), column=getattr(loc, "column", None))


@dataclass
class Diagnostic:
	message: str
	severity: str = "error"
	phase: str | None = None
	span: Span = field(default_factory=Span)
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	@classmethod
	def from_signature_error(cls, err: SignatureError, *, file: Optional[str] = None) -> "Diagnostic":
		notes = [err.pattern] if err.pattern else []
		return cls(message=err.message, phase="parser", span=Span.from_loc(err.loc, file=file), notes=notes)

	def to_json(self) -> dict:
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}

	def format_human(self) -> str:
		line = self.span.line if self.span.line is not None else "?"
		column = self.span.column if self.span.column is not None else "?"
		return f"{self.span.file or '?'}:{line}:{column}: {self.severity}: {self.message}"


__all__ = ["Span", "Diagnostic"]
