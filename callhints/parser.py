# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""
Call-pattern front end.

Two stages, kept separate so each can be tested on its own:

1. `parse_pattern` runs the Lark grammar (`grammar.lark`) and builds the
   syntax tree in `pattern_ast` without judging it.
2. `lower_pattern` applies the placement/shape rules and produces a
   `Signature`:
   - parameters before `*` / `*args` are positional, the rest are keywords;
   - positional parameters never take defaults;
   - `*` / `*args` appear at most once, `**kwargs` only last and untyped;
   - generic type parameters and subscripted types are rejected.

`signature_from_stub` is a second front end that reads the same shape from an
ordinary Python function via `inspect.signature`.
"""

from __future__ import annotations

import inspect
import types
import typing
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from .errors import SignatureError
from .pattern_ast import Located, ParamKind, PatternCall, PatternParam, TypeExpr, TypeName
from .signature import KeywordParam, PositionalParam, Signature, VariadicPositional
from .types_env import FunctionRef, TypeRef

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

# The contextual lexer tells the operators inside default expressions (`*`,
# `/`, `|`, unary `-`) apart from the parameter markers and type unions.
_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="pattern",
	propagate_positions=True,
	maybe_placeholders=False,
)

_TYPE_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="type_expr",
	propagate_positions=True,
	maybe_placeholders=False,
)

FunctionLike = Optional[Callable[..., Any] | str | FunctionRef]


def parse_pattern(source: str) -> PatternCall:
	"""Parse `source` into a `PatternCall`; syntax errors become `SignatureError`."""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		raise SignatureError(
			_describe_unexpected(err),
			loc=_error_loc(err),
			pattern=source,
		) from None
	return _build_call(tree, source)


def parse_type_expr(source: str) -> TypeExpr:
	"""Parse an annotation string such as `"int | None"`."""
	try:
		tree = _TYPE_PARSER.parse(source)
	except UnexpectedInput as err:
		raise SignatureError(
			f"malformed type expression: {_describe_unexpected(err)}",
			loc=_error_loc(err),
			pattern=source,
		) from None
	return _build_type_expr(tree)


def _error_loc(err: UnexpectedInput) -> Located:
	line = getattr(err, "line", None)
	column = getattr(err, "column", None)
	# End-of-input errors carry -1 / None positions.
	if not isinstance(line, int) or line < 1:
		line = 1
	if not isinstance(column, int) or column < 1:
		column = 1
	return Located(line=line, column=column)


def _describe_unexpected(err: UnexpectedInput) -> str:
	if isinstance(err, UnexpectedEOF):
		return "call pattern ended unexpectedly"
	if isinstance(err, UnexpectedToken):
		if err.token.type == "$END":
			return "call pattern ended unexpectedly"
		return f"unexpected `{err.token.value}` in call pattern"
	if isinstance(err, UnexpectedCharacters):
		return f"unexpected character {err.char!r} in call pattern"
	return "malformed call pattern"


def _build_call(tree: Tree, source: str) -> PatternCall:
	name_node = next(child for child in tree.children if isinstance(child, Tree) and _name(child) == "dotted_name")
	type_params: List[str] = []
	type_params_loc: Optional[Located] = None
	params: List[PatternParam] = []
	for child in tree.children:
		if not isinstance(child, Tree):
			continue
		kind = _name(child)
		if kind == "type_params":
			type_params = [tok.value for tok in child.children if isinstance(tok, Token) and tok.type == "NAME"]
			type_params_loc = _loc(child)
		elif kind == "params":
			params = [_build_param(p, source) for p in child.children if isinstance(p, Tree)]
	return PatternCall(
		name=_dotted(name_node),
		params=params,
		loc=_loc(name_node),
		type_params=type_params,
		type_params_loc=type_params_loc,
	)


def _build_param(tree: Tree, source: str) -> PatternParam:
	kind = _name(tree)
	tokens = [child for child in tree.children if isinstance(child, Token)]
	name_tok = next((tok for tok in tokens if tok.type == "NAME"), None)
	type_node = next((c for c in tree.children if isinstance(c, Tree) and _name(c) == "type_expr"), None)
	annotation = _build_type_expr(type_node) if type_node is not None else None
	loc = _loc_from_token(tokens[0]) if tokens else _loc(tree)
	if kind == "plain_param":
		default_node = next((c for c in tree.children if isinstance(c, Tree) and _name(c) == "default"), None)
		default = _build_default(default_node, source) if default_node is not None else None
		return PatternParam(kind=ParamKind.PLAIN, loc=loc, name=name_tok.value, annotation=annotation, default=default)
	if kind == "star_param":
		return PatternParam(kind=ParamKind.VAR_POSITIONAL, loc=loc, name=name_tok.value, annotation=annotation)
	if kind == "bare_star":
		return PatternParam(kind=ParamKind.KEYWORD_MARKER, loc=loc)
	if kind == "slash":
		return PatternParam(kind=ParamKind.POSITIONAL_MARKER, loc=loc)
	if kind == "double_star_param":
		return PatternParam(kind=ParamKind.VAR_KEYWORD, loc=loc, name=name_tok.value, annotation=annotation)
	raise TypeError(f"Unexpected parameter node: {kind}")


def _build_default(tree: Tree, source: str) -> str:
	"""Source text of a default expression, exactly as written."""
	meta = tree.meta
	return source[meta.start_pos:meta.end_pos]


def _build_type_expr(tree: Tree) -> TypeExpr:
	alternatives: List[TypeName] = []
	for atom in tree.children:
		if not isinstance(atom, Tree) or _name(atom) != "type_atom":
			continue
		name_node = atom.children[0]
		args: List[TypeExpr] = []
		subscript = next((c for c in atom.children[1:] if isinstance(c, Tree) and _name(c) == "subscript"), None)
		if subscript is not None:
			args = [_build_type_expr(c) for c in subscript.children if isinstance(c, Tree) and _name(c) == "type_expr"]
		alternatives.append(TypeName(name=_dotted(name_node), args=args, loc=_loc(atom)))
	return TypeExpr(alternatives=alternatives, loc=_loc(tree))


def lower_pattern(
	call: PatternCall,
	*,
	function: FunctionLike = None,
	namespace: Optional[Mapping[str, Any]] = None,
) -> Signature:
	"""Apply the shape rules to a parsed pattern and build its `Signature`."""
	if call.type_params:
		names = ", ".join(call.type_params)
		raise SignatureError(
			f"generic type parameters [{names}] are not supported; constrain each parameter to a concrete class",
			loc=call.type_params_loc or call.loc,
		)

	positionals: List[PositionalParam] = []
	keywords: List[KeywordParam] = []
	variadic: Optional[VariadicPositional] = None
	variadic_keywords: Optional[PatternParam] = None
	keyword_group: Optional[PatternParam] = None  # the `*` or `*args` that opened it
	seen_slash = False

	for param in call.params:
		if variadic_keywords is not None:
			raise SignatureError(
				f"`**{variadic_keywords.name}` can only appear in the last position",
				loc=variadic_keywords.loc,
			)
		kind = param.kind
		if kind is ParamKind.POSITIONAL_MARKER:
			if keyword_group is not None:
				raise SignatureError("`/` must come before `*` and keyword parameters", loc=param.loc)
			if seen_slash:
				raise SignatureError("`/` may appear only once", loc=param.loc)
			if not positionals:
				raise SignatureError("`/` must follow at least one positional parameter", loc=param.loc)
			seen_slash = True
		elif kind is ParamKind.KEYWORD_MARKER or kind is ParamKind.VAR_POSITIONAL:
			if keyword_group is not None:
				raise SignatureError(
					"`*` / `*args` can only appear once, after the last positional parameter",
					loc=param.loc,
				)
			keyword_group = param
			if kind is ParamKind.VAR_POSITIONAL:
				variadic = VariadicPositional(name=param.name, element_constraint=_type_ref(param.annotation, namespace))
		elif kind is ParamKind.VAR_KEYWORD:
			if param.annotation is not None:
				raise SignatureError(f"`**{param.name}` cannot carry a type constraint", loc=param.annotation.loc or param.loc)
			variadic_keywords = param
		elif keyword_group is not None:
			keywords.append(
				KeywordParam(
					name=param.name,
					constraint=_type_ref(param.annotation, namespace),
					required=param.default is None,
					default=param.default,
				)
			)
		else:
			if param.default is not None:
				raise SignatureError(
					f"positional parameter '{param.name}' cannot have a default; "
					"declare it after `*` to make it an optional keyword",
					loc=param.loc,
				)
			positionals.append(PositionalParam(name=param.name, constraint=_type_ref(param.annotation, namespace)))

	if keyword_group is not None and keyword_group.kind is ParamKind.KEYWORD_MARKER and not keywords:
		raise SignatureError("bare `*` must be followed by at least one keyword parameter", loc=keyword_group.loc)

	return Signature(
		function_ref=_function_ref(function, call.name, namespace),
		positionals=tuple(positionals),
		variadic_positional=variadic,
		keywords=tuple(keywords),
		variadic_keywords=variadic_keywords is not None,
	)


def parse_signature(
	pattern: str,
	*,
	function: FunctionLike = None,
	namespace: Optional[Mapping[str, Any]] = None,
) -> Signature:
	"""
	Parse `pattern` (e.g. ``"foo(x: int, *args: str, key: str = 'a', **kwargs)"``)
	into a `Signature`.

	The function identity is `function` when given (a callable, a dotted name,
	or a `FunctionRef`); otherwise the pattern's call name looked up lazily in
	`namespace`. Type names are resolved lazily in `namespace` too.
	"""
	try:
		return lower_pattern(parse_pattern(pattern), function=function, namespace=namespace)
	except SignatureError as err:
		raise err.with_pattern(pattern) from None


def _type_ref(expr: Optional[TypeExpr], namespace: Optional[Mapping[str, Any]]) -> Optional[TypeRef]:
	if expr is None:
		return None
	for alt in expr.alternatives:
		if alt.args:
			raise SignatureError(
				f"parametrized type `{expr.render()}` is not supported; constrain the parameter to a plain class",
				loc=alt.loc or expr.loc,
			)
	return TypeRef.lazy(tuple(alt.name for alt in expr.alternatives), namespace)


def _function_ref(function: FunctionLike, call_name: str, namespace: Optional[Mapping[str, Any]]) -> FunctionRef:
	if function is None:
		return FunctionRef.lazy(call_name, namespace)
	if isinstance(function, FunctionRef):
		return function
	if isinstance(function, str):
		return FunctionRef.lazy(function, namespace)
	return FunctionRef.of(function)


def signature_from_stub(stub: Callable[..., Any], *, function: FunctionLike) -> Signature:
	"""
	Build a `Signature` from an ordinary Python function used as a stub.

	Positional-only and positional-or-keyword parameters become positionals,
	`*args` the variadic group, keyword-only parameters the keywords, and
	`**kwargs` the variadic keyword flag. String annotations (e.g. under
	``from __future__ import annotations``) stay lazy and resolve in the stub's
	globals; class annotations are captured eagerly.
	"""
	label = getattr(stub, "__qualname__", None) or repr(stub)
	try:
		stub_sig = inspect.signature(stub)
	except NameError as err:
		raise SignatureError(
			f"annotations of stub {label} do not resolve ({err}); quote forward references"
		) from err
	except (TypeError, ValueError) as err:
		raise SignatureError(f"cannot read the signature of stub {label}: {err}") from err
	namespace = getattr(stub, "__globals__", None)

	positionals: List[PositionalParam] = []
	keywords: List[KeywordParam] = []
	variadic: Optional[VariadicPositional] = None
	variadic_keywords = False
	for param in stub_sig.parameters.values():
		ref = _annotation_ref(param.annotation, namespace, param.name)
		if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
			if param.default is not inspect.Parameter.empty:
				raise SignatureError(
					f"positional parameter '{param.name}' of stub {label} cannot have a default; "
					"make it keyword-only to declare an optional keyword"
				)
			positionals.append(PositionalParam(name=param.name, constraint=ref))
		elif param.kind is inspect.Parameter.VAR_POSITIONAL:
			variadic = VariadicPositional(name=param.name, element_constraint=ref)
		elif param.kind is inspect.Parameter.KEYWORD_ONLY:
			has_default = param.default is not inspect.Parameter.empty
			keywords.append(
				KeywordParam(
					name=param.name,
					constraint=ref,
					required=not has_default,
					default=repr(param.default) if has_default else None,
				)
			)
		else:
			if ref is not None:
				raise SignatureError(f"`**{param.name}` of stub {label} cannot carry a type constraint")
			variadic_keywords = True

	return Signature(
		function_ref=_function_ref(function, getattr(stub, "__name__", label), namespace),
		positionals=tuple(positionals),
		variadic_positional=variadic,
		keywords=tuple(keywords),
		variadic_keywords=variadic_keywords,
	)


def _annotation_ref(annotation: Any, namespace: Optional[Mapping[str, Any]], param_name: str) -> Optional[TypeRef]:
	if annotation is inspect.Parameter.empty:
		return None
	if isinstance(annotation, str):
		return _type_ref(parse_type_expr(annotation), namespace)
	if annotation is None:
		return TypeRef.of(type(None))
	if annotation is typing.Any or (isinstance(annotation, type) and typing.get_origin(annotation) is None):
		return TypeRef.of(annotation)
	if typing.get_origin(annotation) in (typing.Union, types.UnionType):
		members = [type(None) if arg is None else arg for arg in typing.get_args(annotation)]
		if all(isinstance(arg, type) and typing.get_origin(arg) is None for arg in members):
			return TypeRef.of(*members)
	raise SignatureError(
		f"unsupported annotation {annotation!r} on parameter '{param_name}'; use a plain class or a union of classes"
	)


def _dotted(tree: Tree) -> str:
	return ".".join(tok.value for tok in tree.children if isinstance(tok, Token))


def _loc(tree: Tree) -> Located:
	meta = tree.meta
	return Located(line=getattr(meta, "line", 1), column=getattr(meta, "column", 1))


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line, column=token.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = [
	"parse_pattern",
	"parse_type_expr",
	"lower_pattern",
	"parse_signature",
	"signature_from_stub",
]
