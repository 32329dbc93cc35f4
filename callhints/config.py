# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Deployment-level settings.

Read once from the environment when the default registry is created:

- `CALLHINTS_KEYWORD_MODE`: `instance` (keyword entries carry values, the
  default) or `subtype` (keyword entries carry types).
- `CALLHINTS_COLOR`: `auto` (style only terminals), `always` or `never`.
- `NO_COLOR`: any non-empty value turns `auto` into `never`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .matcher import KeywordComparison

COLOR_MODES = ("auto", "always", "never")

KEYWORD_MODE_ENV = "CALLHINTS_KEYWORD_MODE"
COLOR_ENV = "CALLHINTS_COLOR"


@dataclass(frozen=True)
class HintConfig:
	keyword_check: KeywordComparison = KeywordComparison.INSTANCE
	color_mode: str = "auto"

	def __post_init__(self) -> None:
		if self.color_mode not in COLOR_MODES:
			raise ValueError(f"color mode must be one of {', '.join(COLOR_MODES)}; got {self.color_mode!r}")

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HintConfig":
		env = os.environ if environ is None else environ
		raw_mode = env.get(KEYWORD_MODE_ENV, "").strip().lower() or KeywordComparison.INSTANCE.value
		try:
			keyword_check = KeywordComparison(raw_mode)
		except ValueError:
			choices = ", ".join(mode.value for mode in KeywordComparison)
			raise ValueError(f"{KEYWORD_MODE_ENV} must be one of {choices}; got {raw_mode!r}") from None
		color_mode = env.get(COLOR_ENV, "").strip().lower() or "auto"
		if color_mode not in COLOR_MODES:
			raise ValueError(f"{COLOR_ENV} must be one of {', '.join(COLOR_MODES)}; got {color_mode!r}")
		if color_mode == "auto" and env.get("NO_COLOR"):
			color_mode = "never"
		return cls(keyword_check=keyword_check, color_mode=color_mode)


__all__ = ["HintConfig", "COLOR_MODES", "KEYWORD_MODE_ENV", "COLOR_ENV"]
