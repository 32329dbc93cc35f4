# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
import pytest

from callhints.matcher import Invocation, KeywordComparison, keywords_match, matches, positionals_match
from callhints.parser import parse_signature


def f(*args, **kwargs):
	return None


def g(*args, **kwargs):
	return None


class Base:
	pass


class Derived(Base):
	pass


NS = {"f": f, "g": g, "Base": Base, "Derived": Derived}


def _sig(pattern: str):
	return parse_signature(pattern, namespace=NS)


def _call(*args, **kwargs) -> Invocation:
	return Invocation.from_call(f, args, kwargs)


def test_typed_positionals_and_required_keyword():
	sig = _sig("f(x: int, y, *, z: str)")
	assert matches(sig, _call(1, "anything", z="q"))
	assert matches(sig, _call(True, None, z="q"))
	assert not matches(sig, _call(1, 2))
	assert not matches(sig, _call(1.0, 2, z="q"))
	assert not matches(sig, _call(1, 2, z=3))
	assert not matches(sig, _call(1, 2, 3, z="q"))


def test_optional_keyword_may_be_omitted():
	sig = _sig("f(x, *, z: int = 3)")
	assert matches(sig, _call(1))
	assert matches(sig, _call(1, z=7))
	assert not matches(sig, _call(1, z="7"))
	assert not matches(sig, _call(1, w=7))


def test_fully_open_signature_matches_everything():
	sig = _sig("f(*args, **kwargs)")
	assert matches(sig, _call())
	assert matches(sig, _call(1, "a", None, k=object()))


def test_variadic_element_constraint():
	sig = _sig("f(_: int, *args: str)")
	assert matches(sig, _call(1, "a", "b"))
	assert matches(sig, _call(1))
	assert not matches(sig, _call(1, 2.0))
	assert not matches(sig, _call())


def test_undefined_function_never_matches():
	sig = parse_signature("never_defined(x)", namespace={})
	assert not matches(sig, _call(1))
	assert not matches(sig, Invocation.from_call(g, (1,), {}))


def test_other_function_does_not_match():
	sig = _sig("g(x)")
	assert not matches(sig, _call(1))
	assert matches(sig, Invocation.from_call(g, (1,), {}))


def test_required_keyword_with_kwargs_catch_all():
	sig = _sig("f(*, x: int, **kwargs)")
	assert matches(sig, _call(x=1))
	assert matches(sig, _call(x=1, anything="else"))
	assert not matches(sig, _call(anything="else"))
	assert not matches(sig, _call(1, x=1))


@pytest.mark.parametrize("count, expected", [(0, False), (1, False), (2, True), (3, False)])
def test_arity_is_exact_without_variadic(count: int, expected: bool):
	sig = _sig("f(a, b)")
	assert matches(sig, _call(*range(count))) is expected


@pytest.mark.parametrize("count, expected", [(1, False), (2, True), (5, True)])
def test_arity_is_a_lower_bound_with_variadic(count: int, expected: bool):
	sig = _sig("f(a, b, *rest)")
	assert matches(sig, _call(*range(count))) is expected


def test_widening_a_constraint_keeps_matches():
	narrow = _sig("f(x: Derived, *, k: Derived)")
	wide = _sig("f(x: Base, *, k: Base)")
	calls = [_call(Derived(), k=Derived()), _call(Base(), k=Derived()), _call(Derived(), k=Base())]
	for call in calls:
		if matches(narrow, call):
			assert matches(wide, call)
	assert matches(wide, calls[1])
	assert not matches(narrow, calls[1])


def test_unknown_keyword_without_catch_all():
	sig = _sig("f(*, a=1)")
	assert matches(sig, _call(a=2))
	assert not matches(sig, _call(b=2))


def test_unresolved_constraint_fails_closed():
	sig = _sig("f(x: NotYetDefined)")
	assert not matches(sig, _call(1))
	NS["NotYetDefined"] = int
	try:
		assert matches(sig, _call(1))
	finally:
		del NS["NotYetDefined"]


def test_subtype_comparison_uses_keyword_types():
	sig = _sig("f(*, k: Base)")
	by_type = Invocation.from_call(f, (), {"k": Derived()}, keyword_check=KeywordComparison.SUBTYPE)
	assert by_type.keywords == (("k", Derived),)
	assert matches(sig, by_type, keyword_check=KeywordComparison.SUBTYPE)
	assert not matches(sig, by_type, keyword_check=KeywordComparison.INSTANCE)


def test_of_types_and_helpers():
	sig = _sig("f(x: int, *rest: str, k: int = 0)")
	inv = Invocation.of_types(f, [int, str], {"k": int})
	assert inv.keyword_names == ("k",)
	assert inv.key == "f"
	assert positionals_match(sig, inv.positional_types)
	assert keywords_match(sig, inv.keywords, keyword_check=KeywordComparison.SUBTYPE)
	assert matches(sig, inv, keyword_check=KeywordComparison.SUBTYPE)


def test_keyword_comparison_capture():
	assert KeywordComparison.INSTANCE.capture(3) == 3
	assert KeywordComparison.SUBTYPE.capture(3) is int
	assert KeywordComparison.INSTANCE.check(3, None)
	assert KeywordComparison.SUBTYPE.check(bool, None)
