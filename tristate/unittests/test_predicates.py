"""Unit tests for HasSubstr, MatchesRegexp and Error."""

from __future__ import annotations

import re

import pytest

from tristate.equals import Equals
from tristate.matcher import Verdict
from tristate.predicates import Error, HasSubstr, MatchesRegexp
from tristate.unittests._matcher_helpers import (
    FakeMatcher,
    check_case,
    false_case,
    true_case,
    undefined_case,
)


def test_has_substr() -> None:
    """Substring search over str candidates only."""
    matcher = HasSubstr("taco")
    assert matcher.describe() == 'has substring "taco"'
    check_case(matcher, true_case("taco"))
    check_case(matcher, true_case("burritos and tacos"))
    check_case(matcher, false_case("burrito"))
    check_case(matcher, false_case(""))
    check_case(matcher, undefined_case(b"taco", "which is not a string"))
    check_case(matcher, undefined_case(None, "which is not a string"))
    check_case(matcher, undefined_case(17, "which is not a string"))


def test_has_substr_empty_matches_everything() -> None:
    """Every string contains the empty string."""
    check_case(HasSubstr(""), true_case("asdf"))
    check_case(HasSubstr(""), true_case(""))


def test_matches_regexp_unanchored() -> None:
    """The pattern may match anywhere in the candidate."""
    matcher = MatchesRegexp(r"fo[op]\s+x")
    assert matcher.describe() == 'matches regexp "fo[op]\\\\s+x"'
    check_case(matcher, true_case("blah blah foo x blah blah"))
    check_case(matcher, true_case("fop  x"))
    check_case(matcher, false_case("blah blah fox"))
    check_case(matcher, true_case(b"foo x"))
    check_case(matcher, true_case(bytearray(b"xxfoo\tx")))
    check_case(matcher, undefined_case(17, "which is not a string or bytes"))


def test_matches_regexp_undecodable_bytes() -> None:
    """Bytes that are not valid UTF-8 still match around the bad byte."""
    check_case(MatchesRegexp("ab"), true_case(b"\xffab"))


def test_matches_regexp_invalid_pattern() -> None:
    """Invalid patterns fail at construction."""
    with pytest.raises(re.error):
        MatchesRegexp("(")


def test_error_applies_inner_matcher_to_message() -> None:
    """The inner matcher sees the exception message."""
    matcher = Error(HasSubstr("taco"))
    assert matcher.describe() == 'error has substring "taco"'
    check_case(matcher, true_case(ValueError("taco tuesday")))
    check_case(matcher, false_case(RuntimeError("burrito")))
    check_case(matcher, undefined_case("taco", "which is not an error"))
    check_case(matcher, undefined_case(None, "which is not an error"))


def test_error_passes_inner_result_through() -> None:
    """The inner verdict and diagnostic are returned unchanged."""
    inner = FakeMatcher("is fake", Verdict.FALSE, "which is blah")
    result = Error(inner).match(KeyError("k"))
    assert inner.calls == ["'k'"]
    assert result.verdict is Verdict.FALSE
    assert result.clause == "which is blah"
    check_case(Error(Equals("boom")), true_case(OSError("boom")))
