# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""
Hint registry.

Stores (signature, renderer) entries and, when told about a failed call,
fires the renderer of every entry whose signature matches, in registration
order. The registry never forgets an entry and never deduplicates: registering
the same hint twice makes it print twice.

Entries are bucketed by the short name of the function they target so a
notification only looks at plausible candidates. Lazy function references
(names resolved at match time) may turn out to be aliases, so they live in a
catch-all bucket that is consulted for every notification.

Publication is copy-on-append: writers build new tuples under a lock and swap
them in; readers take the current tuples without locking and therefore always
see a consistent snapshot.
"""

from __future__ import annotations

import heapq
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import HintConfig
from .errors import SignatureError
from .matcher import Invocation, KeywordComparison, matches
from .parser import FunctionLike, parse_signature
from .render import BoundRenderer, Renderer, Sink, StyledMessage
from .signature import Signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HintEntry:
	signature: Signature
	renderer: Renderer
	seq: int

	def fire(self, sink: Sink) -> None:
		self.renderer(sink)


def validate_renderer_options(options: Mapping[Any, Any]) -> Dict[str, Any]:
	"""
	Check that renderer options are a mapping of identifier names.

	Values are not inspected; they are forwarded verbatim to the renderer.
	"""
	if not isinstance(options, Mapping):
		raise SignatureError(f"renderer options must be a mapping of names to values, got {type(options).__name__}")
	for key in options:
		if not isinstance(key, str) or not key.isidentifier():
			raise SignatureError(f"renderer option names must be identifiers, got {key!r}")
	return dict(options)


class Registry:
	"""
	Append-only store of hints.

	`keyword_check` decides whether invocations carry keyword values or types;
	it comes from `config` unless given explicitly.
	"""

	def __init__(
		self,
		*,
		config: Optional[HintConfig] = None,
		keyword_check: Optional[KeywordComparison] = None,
	) -> None:
		self.config = config if config is not None else HintConfig()
		self.keyword_check = keyword_check if keyword_check is not None else self.config.keyword_check
		self._lock = threading.Lock()
		self._entries: Tuple[HintEntry, ...] = ()
		# function short name (None: lazy reference) -> entries in registration order
		self._buckets: Dict[Optional[str], Tuple[HintEntry, ...]] = {}

	def __len__(self) -> int:
		return len(self._entries)

	def entries(self) -> Tuple[HintEntry, ...]:
		return self._entries

	def add(self, signature: Signature, renderer: Renderer) -> HintEntry:
		"""Append an entry for an already-built signature."""
		if not isinstance(signature, Signature):
			raise TypeError(f"expected a Signature, got {type(signature).__name__}")
		if not callable(renderer):
			raise TypeError(f"renderer must be callable, got {renderer!r}")
		key = signature.function_ref.key
		with self._lock:
			entry = HintEntry(signature=signature, renderer=renderer, seq=len(self._entries))
			buckets = dict(self._buckets)
			buckets[key] = buckets.get(key, ()) + (entry,)
			self._buckets = buckets
			self._entries = self._entries + (entry,)
		logger.debug("registered hint #%d for %s", entry.seq, signature)
		return entry

	def register(
		self,
		function: FunctionLike,
		pattern: str | Signature,
		renderer: str | Callable[..., Any],
		*,
		namespace: Optional[Mapping[str, Any]] = None,
		**renderer_options: Any,
	) -> HintEntry:
		"""
		Parse `pattern` and register `renderer` for it.

		`function` is the target (callable, dotted name, or None for the
		pattern's call name looked up in `namespace`). A string `renderer` is a
		message printed with `renderer_options` styling; a callable one is
		called as `renderer(sink, **renderer_options)`.

		Either the whole registration succeeds or nothing is stored.
		"""
		options = validate_renderer_options(renderer_options)
		if isinstance(pattern, Signature):
			if function is not None:
				raise SignatureError("pass the function either in the Signature or as `function`, not both")
			signature = pattern
		else:
			signature = parse_signature(pattern, function=function, namespace=namespace)
		return self.add(signature, self._make_renderer(renderer, options))

	def _make_renderer(self, renderer: str | Callable[..., Any], options: Dict[str, Any]) -> Renderer:
		if isinstance(renderer, str):
			return StyledMessage(renderer, options, color_mode=self.config.color_mode)
		if not callable(renderer):
			raise TypeError(f"renderer must be a message string or a callable, got {renderer!r}")
		if not options:
			return renderer
		return BoundRenderer(renderer, options)

	def candidates(self, invocation: Invocation) -> List[HintEntry]:
		"""Entries that could target `invocation.function`, in registration order."""
		buckets = self._buckets
		named = buckets.get(invocation.key, ()) if invocation.key is not None else ()
		lazy = buckets.get(None, ())
		if not named:
			return list(lazy)
		if not lazy:
			return list(named)
		return list(heapq.merge(named, lazy, key=lambda entry: entry.seq))

	def matching(self, invocation: Invocation) -> List[HintEntry]:
		return [
			entry
			for entry in self.candidates(invocation)
			if matches(entry.signature, invocation, keyword_check=self.keyword_check)
		]

	def notify(self, invocation: Invocation, sink: Sink) -> int:
		"""
		Fire every matching hint into `sink`; return how many fired.

		A renderer that raises is logged and skipped: the hint output is an
		addition to an error report and must not replace the error itself.
		"""
		fired = 0
		for entry in self.matching(invocation):
			try:
				entry.fire(sink)
			except Exception:
				logger.warning("hint renderer #%d for %s failed", entry.seq, entry.signature, exc_info=True)
				continue
			fired += 1
		if fired:
			logger.debug("%d hint(s) fired for %s", fired, invocation.key or invocation.function)
		return fired


_default_registry: Optional[Registry] = None
_default_lock = threading.Lock()


def default_registry() -> Registry:
	"""The process-wide registry, created from `HintConfig.from_env()` on first use."""
	global _default_registry
	registry = _default_registry
	if registry is not None:
		return registry
	with _default_lock:
		if _default_registry is None:
			_default_registry = Registry(config=HintConfig.from_env())
		return _default_registry


def reset_default_registry(registry: Optional[Registry] = None) -> Optional[Registry]:
	"""Replace the process-wide registry (tests); returns the previous one."""
	global _default_registry
	with _default_lock:
		previous = _default_registry
		_default_registry = registry
	return previous


def register(
	function: FunctionLike,
	pattern: str | Signature,
	renderer: str | Callable[..., Any],
	*,
	namespace: Optional[Mapping[str, Any]] = None,
	**renderer_options: Any,
) -> HintEntry:
	"""`Registry.register` on the default registry."""
	return default_registry().register(function, pattern, renderer, namespace=namespace, **renderer_options)


__all__ = [
	"HintEntry",
	"Registry",
	"validate_renderer_options",
	"default_registry",
	"reset_default_registry",
	"register",
]
