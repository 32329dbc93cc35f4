# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""
Command-line tool for writing and debugging call patterns.

	python -m callhints check 'area(shape: Shape, *, scale: float = 1.0)'
	python -m callhints match 'f(x: int, *args: str)' --arg int --arg str

`check` parses each pattern, prints its normalized form and warns about type
names that do not resolve (from builtins or importable modules). `match`
evaluates one pattern against a call described by argument type names, using
the subtype keyword comparison since only types are given.
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .diagnostics import Diagnostic, Span
from .errors import SignatureError
from .matcher import Invocation, KeywordComparison, matches
from .parser import parse_signature
from .signature import Signature
from .types_env import TypeRef


class _ImportingNamespace(dict):
	"""Namespace whose unknown top-level names are imported on first lookup."""

	def __missing__(self, key: str) -> Any:
		try:
			module = importlib.import_module(key)
		except ImportError:
			raise KeyError(key) from None
		self[key] = module
		return module


def _constraints(sig: Signature) -> List[Tuple[str, TypeRef]]:
	out: List[Tuple[str, TypeRef]] = []
	for p in sig.positionals:
		if p.constraint is not None:
			out.append((p.name, p.constraint))
	if sig.variadic_positional is not None and sig.variadic_positional.element_constraint is not None:
		out.append((f"*{sig.variadic_positional.name}", sig.variadic_positional.element_constraint))
	for kw in sig.keywords:
		if kw.constraint is not None:
			out.append((kw.name, kw.constraint))
	return out


def _stand_in(name: str) -> Callable[..., Any]:
	def stand_in(*args: Any, **kwargs: Any) -> None:
		return None

	stand_in.__name__ = stand_in.__qualname__ = name.rpartition(".")[2]
	return stand_in


def _resolve_type_name(name: str, namespace: _ImportingNamespace) -> Any:
	targets = TypeRef.lazy(name, namespace).resolve()
	if targets is None or len(targets) != 1:
		raise SignatureError(f"cannot resolve argument type `{name}`")
	return targets[0]


def _cmd_check(args: argparse.Namespace) -> Tuple[int, List[Diagnostic], List[dict]]:
	diagnostics: List[Diagnostic] = []
	results: List[dict] = []
	for idx, pattern in enumerate(args.patterns, start=1):
		label = f"<pattern {idx}>"
		namespace = _ImportingNamespace()
		try:
			sig = parse_signature(pattern, namespace=namespace)
		except SignatureError as err:
			diagnostics.append(Diagnostic.from_signature_error(err, file=label))
			continue
		unresolved = [f"{param}: {ref}" for param, ref in _constraints(sig) if not ref.is_resolved]
		for item in unresolved:
			diagnostics.append(
				Diagnostic(
					message=f"type constraint `{item}` does not resolve; the hint can never match while it stays unresolved",
					severity="warning",
					phase="resolve",
					span=Span(file=label),
				)
			)
		results.append({"pattern": pattern, "signature": sig.render(), "unresolved": unresolved})
	exit_code = 1 if any(d.severity == "error" for d in diagnostics) else 0
	return exit_code, diagnostics, results


def _cmd_match(args: argparse.Namespace) -> Tuple[int, List[Diagnostic], List[dict]]:
	namespace = _ImportingNamespace()
	label = "<pattern 1>"
	try:
		probe = parse_signature(args.pattern, namespace=namespace)
		stand_in = _stand_in(probe.name)
		sig = parse_signature(args.pattern, function=stand_in, namespace=namespace)
		positional = [_resolve_type_name(name, namespace) for name in args.arg]
		keywords = {}
		for item in args.kw:
			key, sep, type_name = item.partition("=")
			if not sep or not key.isidentifier() or not type_name:
				raise SignatureError(f"--kw expects NAME=TYPE, got `{item}`")
			keywords[key] = _resolve_type_name(type_name, namespace)
	except SignatureError as err:
		return 1, [Diagnostic.from_signature_error(err, file=label)], []
	invocation = Invocation.of_types(stand_in, positional, keywords)
	matched = matches(sig, invocation, keyword_check=KeywordComparison.SUBTYPE)
	result = {"pattern": args.pattern, "signature": sig.render(), "match": matched}
	return (0 if matched else 1), [], [result]


def main(argv: Optional[Sequence[str]] = None) -> int:
	"""
	Entry point for `python -m callhints`.

	With --json, prints one object with `exit_code`, `diagnostics` and
	`results`; otherwise prints results to stdout and diagnostics to stderr.
	"""
	parser = argparse.ArgumentParser(prog="callhints", description="Check and try out call-hint patterns")
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	parser.add_argument("--json", action="store_true", help="Emit structured JSON output")
	sub = parser.add_subparsers(dest="command", required=True)

	check = sub.add_parser("check", help="Parse patterns and report problems")
	check.add_argument("patterns", nargs="+", help="Call pattern(s), e.g. 'f(x: int, *, key: str = \"a\")'")

	match = sub.add_parser("match", help="Match a pattern against argument types")
	match.add_argument("pattern", help="Call pattern")
	match.add_argument("--arg", action="append", default=[], metavar="TYPE", help="Positional argument type (repeatable)")
	match.add_argument("--kw", action="append", default=[], metavar="NAME=TYPE", help="Keyword argument type (repeatable)")

	args = parser.parse_args(argv)
	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(levelname)s: %(message)s")

	if args.command == "check":
		exit_code, diagnostics, results = _cmd_check(args)
	else:
		exit_code, diagnostics, results = _cmd_match(args)

	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [d.to_json() for d in diagnostics],
			"results": results,
		}
		print(json.dumps(payload))
		return exit_code

	for result in results:
		if "match" in result:
			print(f"{'match' if result['match'] else 'no match'}: {result['signature']}")
		else:
			print(f"ok: {result['signature']}")
	for diag in diagnostics:
		print(diag.format_human(), file=sys.stderr)
		for note in diag.notes:
			print(f"  {note}", file=sys.stderr)
	return exit_code


__all__ = ["main"]
