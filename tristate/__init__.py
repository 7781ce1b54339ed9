"""Composable three-valued matchers for unit-test assertions.

A matcher inspects a candidate at runtime and returns a
:class:`~tristate.matcher.Verdict` of ``TRUE``, ``FALSE`` or ``UNDEFINED``
along with a relative clause for failure output. ``UNDEFINED`` marks a
candidate of the wrong kind, and combinators such as :class:`Not` propagate
it rather than inverting it.
"""

from __future__ import annotations

from .combinators import AllOf, AnyOf, Contains, ElementsAre, Not, Panics, Pointee
from .equals import Equals, as_matcher
from .errors import (
    ExpectationFailedError,
    InvalidExpectedValueError,
    NoCurrentTestError,
    TristateError,
)
from .expect import FailureRecord, TestState, assert_that, expect_that, format_failures
from .identity import DeepEquals, HasSameTypeAs, IdenticalTo, StrictEquals
from .matcher import Diagnostic, Matcher, MatchResult, Verdict, new_fatal
from .ordering import GreaterOrEqual, GreaterThan, LessOrEqual, LessThan
from .predicates import Error, HasSubstr, MatchesRegexp

__all__ = [
    "AllOf",
    "AnyOf",
    "Contains",
    "DeepEquals",
    "Diagnostic",
    "ElementsAre",
    "Equals",
    "Error",
    "ExpectationFailedError",
    "FailureRecord",
    "GreaterOrEqual",
    "GreaterThan",
    "HasSameTypeAs",
    "HasSubstr",
    "IdenticalTo",
    "InvalidExpectedValueError",
    "LessOrEqual",
    "LessThan",
    "MatchResult",
    "Matcher",
    "MatchesRegexp",
    "NoCurrentTestError",
    "Not",
    "Panics",
    "Pointee",
    "StrictEquals",
    "TestState",
    "TristateError",
    "Verdict",
    "as_matcher",
    "assert_that",
    "expect_that",
    "format_failures",
    "new_fatal",
]
