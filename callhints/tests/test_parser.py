# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""Pattern grammar and lowering tests."""

import pytest

from callhints.errors import SignatureError
from callhints.parser import parse_pattern, parse_signature, parse_type_expr, signature_from_stub
from callhints.pattern_ast import ParamKind


def target(*args, **kwargs):
	return None


class Shape:
	pass


def test_parse_pattern_records_params_in_source_order():
	call = parse_pattern("pkg.area(shape: Shape, n, *rest: int, key: str = 'a', **extra)")
	assert call.name == "pkg.area"
	assert [p.kind for p in call.params] == [
		ParamKind.PLAIN,
		ParamKind.PLAIN,
		ParamKind.VAR_POSITIONAL,
		ParamKind.PLAIN,
		ParamKind.VAR_KEYWORD,
	]
	assert call.params[0].annotation.render() == "Shape"
	assert call.params[1].annotation is None
	assert call.params[3].default == "'a'"
	assert call.params[0].loc.line == 1
	assert call.params[0].loc.column == 10


def test_parse_pattern_default_literals():
	call = parse_pattern("f(*, a=1, b=-2.5, c=\"x\", d=None, e=..., g=[], h={}, i=(), j=mod.CONST, k=list())")
	defaults = {p.name: p.default for p in call.params if p.kind is ParamKind.PLAIN}
	assert defaults == {
		"a": "1",
		"b": "-2.5",
		"c": '"x"',
		"d": "None",
		"e": "...",
		"g": "[]",
		"h": "{}",
		"i": "()",
		"j": "mod.CONST",
		"k": "list()",
	}


@pytest.mark.parametrize(
	"default",
	[
		"(1, 2)",
		"(x,)",
		"[1]",
		"[*base, 2]",
		"{'a': 1}",
		"{'a': 1, **extra}",
		"{1, 2}",
		"30 * 60",
		"2 ** -1",
		"-x",
		"~mask",
		"Mode.READ | Mode.WRITE",
		"dict(a=1)",
		"partial(f, *args, key=[1], **kw)",
		"cfg['timeout'] // 2",
		"0x1F",
		"1e-3",
		"b'raw'",
		"'a' 'b'",
	],
)
def test_keyword_default_keeps_expression_source(default: str):
	sig = parse_signature(f"f(*, k={default})", function=target)
	assert sig.keyword("k").default == default
	assert not sig.keyword("k").required
	assert sig.render() == f"target(*, k={default})"


def test_typed_keyword_default_expression():
	sig = parse_signature("f(*, timeout: int = 30 * 60, mode: Mode = Mode.READ | Mode.WRITE, **kwargs)", function=target)
	assert sig.keyword("timeout").default == "30 * 60"
	assert sig.keyword("mode").default == "Mode.READ | Mode.WRITE"
	assert [kw.name for kw in sig.keywords] == ["timeout", "mode"]
	assert sig.variadic_keywords


def test_default_expression_does_not_swallow_following_markers():
	sig = parse_signature("f(x, *args: str, k=a * b, **kwargs)", function=target)
	assert [p.name for p in sig.positionals] == ["x"]
	assert sig.variadic_positional.name == "args"
	assert sig.keyword("k").default == "a * b"
	assert sig.variadic_keywords


@pytest.mark.parametrize("pattern", ["f(*, k=(1, 2)", "f(*, k=[1)", "f(*, k=1 +)", "f(*, k=dict(a=))"])
def test_unbalanced_default_expressions_are_rejected(pattern: str):
	with pytest.raises(SignatureError):
		parse_signature(pattern, function=target)


def test_parse_type_expr_union_and_subscript():
	expr = parse_type_expr("int | collections.abc.Sequence[str] | None")
	assert [alt.name for alt in expr.alternatives] == ["int", "collections.abc.Sequence", "None"]
	assert expr.alternatives[1].args[0].render() == "str"


def test_unconstrained_and_constrained_positionals():
	sig = parse_signature("f(x: int, y)", function=target)
	assert [p.name for p in sig.positionals] == ["x", "y"]
	assert str(sig.positionals[0].constraint) == "int"
	assert sig.positionals[1].constraint is None
	assert sig.variadic_positional is None
	assert sig.keywords == ()
	assert sig.variadic_keywords is False


def test_zero_parameters_is_valid():
	sig = parse_signature("f()", function=target)
	assert sig.positionals == ()
	assert sig.accepts_arity(0)
	assert not sig.accepts_arity(1)


def test_anonymous_positionals_may_repeat():
	sig = parse_signature("f(_: int, _: str)", function=target)
	assert [str(p.constraint) for p in sig.positionals] == ["int", "str"]


def test_variadic_positional_with_and_without_element_type():
	sig = parse_signature("f(_: int, *args: str)", function=target)
	assert sig.variadic_positional.name == "args"
	assert str(sig.variadic_positional.element_constraint) == "str"
	sig = parse_signature("f(*args)", function=target)
	assert sig.variadic_positional.element_constraint is None


def test_keyword_required_status():
	sig = parse_signature("f(x, *, a, b: int, c=3, d: int = 3, **kwargs)", function=target)
	status = {kw.name: kw.required for kw in sig.keywords}
	assert status == {"a": True, "b": True, "c": False, "d": False}
	assert sig.keyword("d").default == "3"
	assert str(sig.keyword("d").constraint) == "int"
	assert sig.keyword("a").constraint is None
	assert sig.variadic_keywords is True


def test_parameters_after_star_args_are_keywords():
	sig = parse_signature("f(x, *args, z: str)", function=target)
	assert [p.name for p in sig.positionals] == ["x"]
	assert [kw.name for kw in sig.keywords] == ["z"]
	assert sig.keyword("z").required


def test_positional_only_marker_is_accepted():
	sig = parse_signature("f(a, b, /, c, *, d)", function=target)
	assert [p.name for p in sig.positionals] == ["a", "b", "c"]
	assert [kw.name for kw in sig.keywords] == ["d"]


def test_function_defaults_to_pattern_name_in_namespace():
	sig = parse_signature("target(x)", namespace={"target": target})
	assert sig.function_ref.is_lazy
	assert sig.function_ref.resolve() is target


def test_render_round_trips_normalized_form():
	sig = parse_signature("f(x: int, y, *, z: str, w: int = 3, v=None, **kwargs)", function=target)
	assert sig.render() == "target(x: int, y, *, z: str, w: int = 3, v=None, **kwargs)"


@pytest.mark.parametrize(
	"pattern, fragment",
	[
		("f[T](x: T)", "generic type parameters"),
		("f(x: list[int])", "parametrized type"),
		("f(**kwargs, x)", "last position"),
		("f(*args, *more)", "only appear once"),
		("f(*, *args)", "only appear once"),
		("f(x=1)", "cannot have a default"),
		("f(x, *)", "bare `*`"),
		("f(*, a, /)", "`/` must come before"),
		("f(/, a)", "at least one positional"),
		("f(a, /, b, /)", "only once"),
		("f(**kwargs: int)", "cannot carry a type constraint"),
		("f(x, x)", "duplicate parameter name 'x'"),
		("f(x, *, x)", "duplicate parameter name 'x'"),
	],
)
def test_rejected_shapes(pattern: str, fragment: str):
	with pytest.raises(SignatureError) as excinfo:
		parse_signature(pattern, function=target)
	assert fragment in str(excinfo.value)
	assert excinfo.value.pattern == pattern


@pytest.mark.parametrize(
	"pattern",
	[
		"f",
		"f(",
		"f(x: )",
		"f(x = )",
		"f(3)",
		"f(*, 3)",
		"f(x: int = = 2)",
		"1f(x)",
		"f(x) extra",
	],
)
def test_malformed_patterns_raise_signature_error(pattern: str):
	with pytest.raises(SignatureError) as excinfo:
		parse_signature(pattern, function=target)
	assert excinfo.value.loc is not None
	assert excinfo.value.loc.line >= 1


def test_generic_error_points_at_type_params():
	with pytest.raises(SignatureError) as excinfo:
		parse_signature("f[T](x: T)")
	assert excinfo.value.loc.column == 2


def test_unresolved_names_do_not_fail_parsing():
	sig = parse_signature("does_not_exist(x: NoSuchType)", namespace={})
	assert sig.function_ref.resolve() is None
	assert sig.positionals[0].constraint.resolve() is None


def test_signature_from_stub_reads_parameter_kinds():
	def stub(shape: Shape, n, /, *rest: int, key: str, flag: bool = False, **extra):
		...

	sig = signature_from_stub(stub, function=target)
	assert sig.function_ref.resolve() is target
	assert [p.name for p in sig.positionals] == ["shape", "n"]
	assert sig.positionals[0].constraint.resolve() == (Shape,)
	assert sig.positionals[1].constraint is None
	assert sig.variadic_positional.element_constraint.resolve() == (int,)
	assert sig.keyword("key").required
	assert not sig.keyword("flag").required
	assert sig.keyword("flag").default == "False"
	assert sig.variadic_keywords


def test_signature_from_stub_string_annotations_stay_lazy():
	def stub(x: "Later | None"):
		...

	sig = signature_from_stub(stub, function=target)
	ref = sig.positionals[0].constraint
	assert ref.is_lazy
	assert ref.resolve() is None
	stub.__globals__["Later"] = Shape
	try:
		assert ref.resolve() == (Shape, type(None))
	finally:
		del stub.__globals__["Later"]


def test_signature_from_stub_union_annotation():
	def stub(x: int | str):
		...

	sig = signature_from_stub(stub, function=target)
	assert sig.positionals[0].constraint.resolve() == (int, str)


def test_signature_from_stub_rejects_generic_alias_and_defaults():
	def generic(x: list[int]):
		...

	def defaulted(x=1):
		...

	with pytest.raises(SignatureError, match="unsupported annotation"):
		signature_from_stub(generic, function=target)
	with pytest.raises(SignatureError, match="cannot have a default"):
		signature_from_stub(defaulted, function=target)
