# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hint renderers.

A renderer is any callable taking a text sink (`sink.write(str)`). The stock
one, `StyledMessage`, writes a newline and then the message, optionally wrapped
in ANSI styling. Styling options are the ones a terminal understands:

	color: a name from `COLORS` or an int 0-255
	bold, italic, underline, blink, reverse, hidden: bool

Options the renderer does not know are ignored (they are still kept on the
renderer, unchanged). Styling is only emitted when the color mode allows it:
`always`, or `auto` with a sink that is a terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Protocol

logger = logging.getLogger(__name__)

COLORS: Mapping[str, int] = {
	"black": 30,
	"red": 31,
	"green": 32,
	"yellow": 33,
	"blue": 34,
	"magenta": 35,
	"cyan": 36,
	"white": 37,
	"normal": 39,
	"default": 39,
	"light_black": 90,
	"light_red": 91,
	"light_green": 92,
	"light_yellow": 93,
	"light_blue": 94,
	"light_magenta": 95,
	"light_cyan": 96,
	"light_white": 97,
}

FLAGS: Mapping[str, int] = {
	"bold": 1,
	"italic": 3,
	"underline": 4,
	"blink": 5,
	"reverse": 7,
	"hidden": 8,
}

RESET = "\033[0m"


class Sink(Protocol):
	def write(self, text: str) -> Any:
		...


Renderer = Callable[[Sink], Any]


def style_codes(options: Mapping[str, Any]) -> List[str]:
	"""SGR parameters for `options`, in a stable order (color first)."""
	codes: List[str] = []
	color = options.get("color")
	if isinstance(color, bool):
		logger.debug("ignoring boolean color option %r", color)
	elif isinstance(color, int):
		if 0 <= color <= 255:
			codes.append(f"38;5;{color}")
		else:
			logger.debug("ignoring out-of-range color %r", color)
	elif isinstance(color, str):
		code = COLORS.get(color.lower())
		if code is None:
			logger.debug("ignoring unknown color %r", color)
		else:
			codes.append(str(code))
	for flag, code in FLAGS.items():
		if options.get(flag):
			codes.append(str(code))
	return codes


def color_enabled(sink: Any, color_mode: str) -> bool:
	if color_mode == "always":
		return True
	if color_mode == "never":
		return False
	isatty = getattr(sink, "isatty", None)
	try:
		return bool(isatty()) if callable(isatty) else False
	except (OSError, ValueError):
		# closed or detached stream
		return False


def printstyled(sink: Sink, text: str, /, *, color_mode: str = "auto", **options: Any) -> None:
	codes = style_codes(options) if color_enabled(sink, color_mode) else []
	if not codes:
		sink.write(text)
		return
	sink.write(f"\033[{';'.join(codes)}m{text}{RESET}")


@dataclass(frozen=True)
class StyledMessage:
	"""
	Renderer printing `message` on its own line with `options` styling.

	A `color_mode` option overrides the registry-wide mode for this hint.
	"""

	message: str
	options: Dict[str, Any] = field(default_factory=dict, hash=False)
	color_mode: str = "auto"

	def __call__(self, sink: Sink) -> None:
		options = dict(self.options)
		color_mode = options.pop("color_mode", self.color_mode)
		sink.write("\n")
		printstyled(sink, self.message, color_mode=color_mode, **options)


@dataclass(frozen=True)
class BoundRenderer:
	"""A user renderer with its registration options bound: calls `func(sink, **options)`."""

	func: Callable[..., Any]
	options: Dict[str, Any] = field(default_factory=dict, hash=False)

	def __call__(self, sink: Sink) -> Any:
		return self.func(sink, **self.options)


__all__ = [
	"COLORS",
	"FLAGS",
	"Sink",
	"Renderer",
	"style_codes",
	"color_enabled",
	"printstyled",
	"StyledMessage",
	"BoundRenderer",
]
