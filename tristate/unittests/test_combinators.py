"""Unit tests for the matcher combinators."""

from __future__ import annotations

import ctypes

import numpy as np
import pytest

from tristate.combinators import (
    AllOf,
    AnyOf,
    Contains,
    ElementsAre,
    Not,
    Panics,
    Pointee,
)
from tristate.equals import Equals
from tristate.matcher import Diagnostic, Verdict
from tristate.ordering import GreaterThan, LessThan
from tristate.predicates import Error, HasSubstr
from tristate.unittests._matcher_helpers import (
    FakeMatcher,
    check_case,
    false_case,
    true_case,
    undefined_case,
)

# Not


def test_not_inverts_true_and_false() -> None:
    """TRUE and FALSE swap; the inner clause is dropped."""
    check_case(Not(FakeMatcher("", Verdict.TRUE)), false_case(0))
    check_case(Not(FakeMatcher("", Verdict.FALSE, "which is odd")), true_case(0))


def test_not_passes_undefined_through() -> None:
    """A kind mismatch is not inverted."""
    inner = FakeMatcher("", Verdict.UNDEFINED, "which is foo", fatal=True)
    check_case(Not(inner), undefined_case(0, "which is foo"))
    check_case(Not(Not(inner)), undefined_case(0, "which is foo"))


def test_not_with_real_matchers() -> None:
    """Values are promoted to Equals."""
    matcher = Not(17)
    assert matcher.describe() == "not(17)"
    check_case(matcher, true_case(18))
    check_case(matcher, false_case(17.0))
    check_case(matcher, undefined_case("17", "which is not numeric"))
    check_case(Not(Not(17)), true_case(np.uint8(17)))


def test_not_calls_inner_once() -> None:
    """The wrapped matcher is evaluated exactly once per match."""
    inner = FakeMatcher("is fake")
    assert Not(inner).describe() == "not(is fake)"
    Not(inner).match(17)
    assert inner.calls == [17]


# AllOf


def test_all_of_empty_matches_everything() -> None:
    """With no children, every candidate matches."""
    matcher = AllOf()
    assert matcher.describe() == "is anything"
    check_case(matcher, true_case(None))
    check_case(matcher, true_case("taco"))


def test_all_of_description() -> None:
    """Child descriptions are joined with ', and '."""
    matcher = AllOf(GreaterThan(17), LessThan(19))
    assert matcher.describe() == "greater than 17, and less than 19"
    check_case(matcher, true_case(18))
    check_case(matcher, false_case(19))


def test_all_of_false_wins_over_undefined() -> None:
    """A FALSE child makes the whole match FALSE."""
    matcher = AllOf(
        FakeMatcher("", Verdict.TRUE),
        FakeMatcher("", Verdict.UNDEFINED, "which is foo", fatal=True),
        FakeMatcher("", Verdict.FALSE, "which is bar"),
    )
    result = matcher.match(0)
    assert result.verdict is Verdict.FALSE
    assert result.diagnostic == Diagnostic("which is foo", fatal=True)


def test_all_of_reports_first_nonempty_clause() -> None:
    """Without fatal children the first non-empty clause is used."""
    matcher = AllOf(
        FakeMatcher("", Verdict.FALSE),
        FakeMatcher("", Verdict.FALSE, "which is foo"),
        FakeMatcher("", Verdict.FALSE, "which is bar"),
    )
    check_case(matcher, false_case(0, "which is foo"))


def test_all_of_prefers_fatal_diagnostic() -> None:
    """The first fatal diagnostic beats an earlier plain clause."""
    matcher = AllOf(
        FakeMatcher("", Verdict.FALSE, "which is foo"),
        FakeMatcher("", Verdict.FALSE, "which is bar", fatal=True),
    )
    result = matcher.match(0)
    assert result.verdict is Verdict.FALSE
    assert result.diagnostic == Diagnostic("which is bar", fatal=True)


def test_all_of_all_undefined() -> None:
    """Only UNDEFINED failures yield the first of them."""
    matcher = AllOf(
        FakeMatcher("", Verdict.TRUE),
        FakeMatcher("", Verdict.UNDEFINED, "which is foo", fatal=True),
        FakeMatcher("", Verdict.UNDEFINED, "which is bar", fatal=True),
    )
    check_case(matcher, undefined_case(0, "which is foo"))


def test_all_of_non_fatal_undefined_is_false() -> None:
    """An UNDEFINED child without a fatal diagnostic counts as FALSE."""
    matcher = AllOf(FakeMatcher("", Verdict.UNDEFINED, "which is foo"))
    check_case(matcher, false_case(0, "which is foo"))

    matcher = AllOf(
        FakeMatcher("", Verdict.UNDEFINED, "which is foo"),
        FakeMatcher("", Verdict.UNDEFINED, "which is bar", fatal=True),
    )
    result = matcher.match(0)
    assert result.verdict is Verdict.FALSE
    assert result.diagnostic == Diagnostic("which is bar", fatal=True)


def test_all_of_evaluates_every_child() -> None:
    """Children after a failure still run."""
    children = [
        FakeMatcher("", Verdict.FALSE),
        FakeMatcher("", Verdict.TRUE),
        FakeMatcher("", Verdict.UNDEFINED, "", fatal=True),
    ]
    AllOf(*children).match("x")
    assert [child.calls for child in children] == [["x"], ["x"], ["x"]]


# AnyOf


def test_any_of_returns_true_when_any_child_matches() -> None:
    """Bare values are compared with Equals."""
    matcher = AnyOf(
        FakeMatcher("", Verdict.UNDEFINED, "foo", fatal=True),
        17,
        FakeMatcher("", Verdict.FALSE, "foo"),
        FakeMatcher("", Verdict.TRUE),
    )
    check_case(matcher, true_case(0))


def test_any_of_stops_at_first_true() -> None:
    """Later children are not evaluated after a TRUE."""
    later = FakeMatcher("")
    AnyOf(Equals(17), later).match(17)
    assert later.calls == []


def test_any_of_reports_first_undefined() -> None:
    """Without a TRUE child, the first UNDEFINED is returned."""
    matcher = AnyOf(
        FakeMatcher("", Verdict.FALSE, "which is bar"),
        FakeMatcher("", Verdict.UNDEFINED, "which is foo", fatal=True),
        FakeMatcher("", Verdict.UNDEFINED, "which is baz", fatal=True),
    )
    check_case(matcher, undefined_case(0, "which is foo"))


def test_any_of_all_false() -> None:
    """All FALSE children give a FALSE with no clause."""
    matcher = AnyOf(FakeMatcher("", Verdict.FALSE, "which is bar"), 17)
    check_case(matcher, false_case(0))


def test_any_of_description() -> None:
    """Descriptions are wrapped in or(...)."""
    assert AnyOf(17, HasSubstr("taco")).describe() == 'or(17, has substring "taco")'
    assert AnyOf().describe() == "or()"
    check_case(AnyOf(), false_case(0))


# Pointee


def test_pointee() -> None:
    """The inner matcher applies to the pointer target."""
    matcher = Pointee(17)
    assert matcher.describe() == "pointee(17)"
    check_case(matcher, true_case(ctypes.pointer(ctypes.c_int(17))))
    check_case(matcher, false_case(ctypes.pointer(ctypes.c_int(18))))
    check_case(matcher, true_case(ctypes.pointer(ctypes.c_double(17.0))))


def test_pointee_rejects_non_pointers() -> None:
    """Non-pointers and null pointers are not dereferenced."""
    matcher = Pointee(17)
    check_case(matcher, undefined_case(17, "which is not a pointer"))
    check_case(matcher, undefined_case(None, "which is not a pointer"))
    null = ctypes.POINTER(ctypes.c_int)()
    check_case(matcher, undefined_case(null, "which is a nil pointer"))


def test_pointee_propagates_inner_result() -> None:
    """The inner diagnostic is returned unchanged."""
    inner = FakeMatcher("", Verdict.UNDEFINED, "which is foo", fatal=True)
    check_case(
        Pointee(inner), undefined_case(ctypes.pointer(ctypes.c_int(1)), "which is foo")
    )


# ElementsAre


def test_elements_are_description() -> None:
    """Descriptions are listed in brackets."""
    assert ElementsAre().describe() == "elements are: []"
    assert ElementsAre(17, LessThan(3)).describe() == "elements are: [17, less than 3]"


def test_elements_are_matches_positions() -> None:
    """Each element must satisfy the matcher at its position."""
    matcher = ElementsAre(17, LessThan(3))
    check_case(matcher, true_case([17, 2]))
    check_case(matcher, true_case((17.0, np.int8(-1))))
    check_case(matcher, true_case(np.array([17, 2])))
    check_case(matcher, false_case([18, 2], "whose element 0 doesn't match"))
    check_case(matcher, false_case([17, 3], "whose element 1 doesn't match"))


def test_elements_are_length_mismatch() -> None:
    """A wrong length is a FALSE naming the actual length."""
    check_case(ElementsAre(), true_case([]))
    check_case(ElementsAre(), false_case([1], "which is of length 1"))
    check_case(ElementsAre(1, 2), false_case([1], "which is of length 1"))


def test_elements_are_rejects_non_sequences() -> None:
    """Only lists, tuples and arrays are accepted."""
    for candidate in (None, "ab", {"a": 1}, 17):
        check_case(
            ElementsAre(1), undefined_case(candidate, "which is not an array or slice")
        )


def test_elements_are_rejects_zero_dimensional_arrays() -> None:
    """A 0-d array is a scalar, not a sequence."""
    check_case(
        ElementsAre(5), undefined_case(np.array(5), "which is not an array or slice")
    )


def test_elements_are_includes_inner_clause() -> None:
    """A clause from the failing element is appended."""
    matcher = ElementsAre(FakeMatcher("", Verdict.FALSE, "which is foo"))
    check_case(matcher, false_case([0], "whose element 0 doesn't match, which is foo"))


def test_elements_are_fatal_element_is_undefined() -> None:
    """A fatal element mismatch is reported ahead of a plain one."""
    matcher = ElementsAre(
        FakeMatcher("", Verdict.FALSE, "which is foo"),
        FakeMatcher("", Verdict.FALSE, "which is bar", fatal=True),
    )
    check_case(
        matcher, undefined_case([0, 0], "whose element 1 doesn't match, which is bar")
    )
    check_case(
        ElementsAre(17),
        undefined_case(["17"], "whose element 0 doesn't match, which is not numeric"),
    )


# Contains


def test_contains() -> None:
    """At least one element must match."""
    matcher = Contains(17)
    assert matcher.describe() == "contains: 17"
    check_case(matcher, true_case([1, 17, 3]))
    check_case(matcher, true_case(("a", 17.0)))
    check_case(matcher, true_case(np.array([17, 19])))
    check_case(matcher, false_case([1, 2]))
    check_case(matcher, false_case([]))
    check_case(matcher, false_case(["17"]))


def test_contains_rejects_non_sequences() -> None:
    """Strings and None are not sequences of elements."""
    check_case(Contains("x"), undefined_case(None, "which is not an array or slice"))
    check_case(Contains("x"), undefined_case("xyz", "which is not an array or slice"))
    check_case(
        Contains(5), undefined_case(np.array(5), "which is not an array or slice")
    )


# Panics


def _raise_value_error() -> None:
    raise ValueError(17)


def _return_normally() -> int:
    return 17


def test_panics_description() -> None:
    """The inner description follows 'panics with:'."""
    assert Panics(HasSubstr("taco")).describe() == 'panics with: has substring "taco"'


def test_panics_matches_exception() -> None:
    """The raised exception is the payload given to the inner matcher."""
    check_case(Panics(Error(Equals("17"))), true_case(_raise_value_error))
    check_case(
        Panics(Error(HasSubstr("taco"))),
        false_case(_raise_value_error, "which panicked with: 17"),
    )


def test_panics_appends_inner_clause() -> None:
    """The inner clause and verdict are kept."""
    inner = FakeMatcher("", Verdict.FALSE, "which blah")
    check_case(
        Panics(inner),
        false_case(_raise_value_error, "which panicked with: 17, which blah"),
    )
    fatal = FakeMatcher("", Verdict.UNDEFINED, "which blah", fatal=True)
    check_case(
        Panics(fatal),
        undefined_case(_raise_value_error, "which panicked with: 17, which blah"),
    )


def test_panics_renders_exceptions_without_a_single_argument() -> None:
    """Exceptions raised with no argument, or several, render as themselves."""

    def raises_bare() -> None:
        raise KeyError

    def raises_pair() -> None:
        raise ValueError(1, "two")

    inner = FakeMatcher("", Verdict.FALSE)
    check_case(
        Panics(inner), false_case(raises_bare, "which panicked with: KeyError()")
    )
    check_case(
        Panics(inner),
        false_case(raises_pair, "which panicked with: ValueError(1, 'two')"),
    )


def test_panics_requires_a_raise() -> None:
    """A function that returns is a FALSE."""
    inner = FakeMatcher("")
    check_case(Panics(inner), false_case(_return_normally, "which didn't panic"))
    assert inner.calls == []


@pytest.mark.parametrize(
    "candidate",
    [None, 17, "taco", lambda x: x, Error],
    ids=["none", "int", "str", "one-arg-lambda", "class-with-args"],
)
def test_panics_rejects_non_zero_arg_callables(candidate: object) -> None:
    """Only callables taking no arguments are invoked."""
    check_case(
        Panics(FakeMatcher("")),
        undefined_case(candidate, "which is not a zero-arg function"),
    )


def test_panics_accepts_defaulted_parameters() -> None:
    """Parameters with defaults do not prevent the call."""

    def raises(value: int = 3) -> None:
        raise KeyError(value)

    check_case(Panics(Error(Equals("3"))), true_case(raises))
