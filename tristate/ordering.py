"""Ordering matchers for numbers and strings.

Numbers are compared with the same folding rules as
:class:`~tristate.equals.Equals`, so a candidate that rounds to the limit at
the narrowest float precision involved counts as equal to it. Strings compare
by code point. Comparing a number with a string, or anything with a complex,
boolean or non-scalar value, is undefined.
"""

from __future__ import annotations

import operator
import typing as t

from .errors import InvalidExpectedValueError
from .formatting import quote, render
from .kinds import (
    FLOAT_KINDS,
    INTEGER_KINDS,
    Kind,
    classify,
    compare_numbers,
    numeric_value,
    type_name,
)
from .matcher import Matcher, MatchResult

_ORDERED_NUMERIC_KINDS: t.Final = INTEGER_KINDS | FLOAT_KINDS


class _OrderingMatcher(Matcher):
    """Shared implementation for the four ordering matchers."""

    _phrase: t.ClassVar[str]
    _accept: t.ClassVar[t.Callable[[int, int], bool]]
    # Result for NaN operands; GreaterThan(x) is Not(LessOrEqual(x)) there too.
    _unordered: t.ClassVar[bool] = False

    def __init__(self, limit: object) -> None:
        kind = classify(limit)
        if kind not in _ORDERED_NUMERIC_KINDS and kind is not Kind.STRING:
            msg = f"{type(self).__name__}: unexpected kind {type_name(limit)}"
            raise InvalidExpectedValueError(msg)
        self._limit = limit
        self._kind = kind

    def describe(self) -> str:
        """Return ``"<phrase> <limit>"``."""
        if self._kind is Kind.STRING:
            shown = quote(str(self._limit))
        else:
            shown = render(numeric_value(self._limit, self._kind))
        return f"{self._phrase} {shown}"

    def _compare(self, candidate: object) -> int | None | MatchResult:
        kind = classify(candidate)
        if self._kind is Kind.STRING:
            if kind is not Kind.STRING:
                return MatchResult.undefined("which is not comparable")
            text, limit = str(candidate), str(self._limit)
            return (text > limit) - (text < limit)
        if kind not in _ORDERED_NUMERIC_KINDS:
            return MatchResult.undefined("which is not comparable")
        return compare_numbers(candidate, kind, self._limit, self._kind)

    def match(self, candidate: object) -> MatchResult:
        """Compare *candidate* against the limit."""
        outcome = self._compare(candidate)
        if isinstance(outcome, MatchResult):
            return outcome
        if outcome is None:
            accepted = self._unordered
        else:
            accepted = type(self)._accept(outcome, 0)
        return MatchResult.true() if accepted else MatchResult.false()


class LessThan(_OrderingMatcher):
    """Match numbers or strings strictly less than ``limit``."""

    _phrase = "less than"
    _accept = staticmethod(operator.lt)


class LessOrEqual(_OrderingMatcher):
    """Match numbers or strings less than or equal to ``limit``."""

    _phrase = "less than or equal to"
    _accept = staticmethod(operator.le)


class GreaterThan(_OrderingMatcher):
    """Match numbers or strings strictly greater than ``limit``."""

    _phrase = "greater than"
    _accept = staticmethod(operator.gt)
    _unordered = True


class GreaterOrEqual(_OrderingMatcher):
    """Match numbers or strings greater than or equal to ``limit``."""

    _phrase = "greater than or equal to"
    _accept = staticmethod(operator.ge)
    _unordered = True


__all__ = ["GreaterOrEqual", "GreaterThan", "LessOrEqual", "LessThan"]
