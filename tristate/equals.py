"""The :class:`Equals` matcher and bare-value promotion."""

from __future__ import annotations

import ctypes
import typing as t

from .errors import InvalidExpectedValueError
from .formatting import render
from .identity import values_equal
from .kinds import (
    NUMERIC_KINDS,
    REFERENCE_KINDS,
    Kind,
    classify,
    is_null_pointer,
    numbers_equal,
    numeric_value,
    type_name,
)
from .matcher import Matcher, MatchResult

_KIND_CLAUSES: t.Final[dict[Kind, str]] = {
    Kind.BOOL: "which is not a bool",
    Kind.STRING: "which is not a string",
    Kind.BYTES: "which is not bytes",
    Kind.ADDRESS: "which is not a c_void_p",
    Kind.FUNCTION: "which is not a function",
    Kind.SLICE: "which is not a list",
    Kind.MAP: "which is not a dict",
}


def _scalar(value: object) -> object:
    """Unwrap ctypes simple values to their Python payload."""
    if isinstance(value, ctypes._SimpleCData):
        return value.value
    return value


def _same_pointer(a: ctypes._Pointer[t.Any], b: ctypes._Pointer[t.Any]) -> bool:
    if not a or not b:
        return not a and not b
    return ctypes.addressof(a.contents) == ctypes.addressof(b.contents)


class Equals(Matcher):
    """Match values equal to ``expected`` with cross-kind numeric folding.

    Numbers of every width and signedness are compared by mathematical value,
    subject to the rounding of the narrowest float type involved. Lists,
    dicts, functions and other objects compare by identity; use
    :class:`~tristate.identity.DeepEquals` for structural comparison.
    """

    def __init__(self, expected: object) -> None:
        kind = classify(expected)
        if kind in (Kind.ARRAY, Kind.STRUCT):
            msg = (
                f"Equals: invalid expected value of type {type_name(expected)}; "
                "use DeepEquals or ElementsAre"
            )
            raise InvalidExpectedValueError(msg)
        self._expected = expected
        self._kind = kind
        self._value: object = expected
        if kind in NUMERIC_KINDS:
            self._value = numeric_value(expected, kind)
        elif kind is Kind.BOOL:
            self._value = bool(_scalar(expected))

    @property
    def expected(self) -> object:
        """Return the value supplied at construction."""
        return self._expected

    def describe(self) -> str:
        """Return the rendered expected value."""
        if self._kind is Kind.NONE:
            return "is None"
        return render(self._value)

    def match(self, candidate: object) -> MatchResult:  # noqa: PLR0911
        """Compare *candidate* with the expected value."""
        kind = classify(candidate)
        expected_kind = self._kind
        if expected_kind is Kind.NONE:
            return self._match_none(candidate, kind)
        if expected_kind in NUMERIC_KINDS:
            if kind not in NUMERIC_KINDS:
                return MatchResult.undefined("which is not numeric")
            equal = numbers_equal(self._expected, expected_kind, candidate, kind)
            return MatchResult.true() if equal else MatchResult.false()
        if expected_kind is Kind.POINTER:
            return self._match_pointer(candidate)
        if expected_kind is Kind.OTHER:
            # Arrays compare element-wise and have no single truth value.
            equal = candidate is self._expected or (
                kind is not Kind.ARRAY and values_equal(candidate, self._expected)
            )
            return MatchResult.true() if equal else MatchResult.false()
        if kind is not expected_kind:
            return MatchResult.undefined(_KIND_CLAUSES[expected_kind])
        return self._match_same_kind(candidate, kind)

    def _match_same_kind(self, candidate: object, kind: Kind) -> MatchResult:
        if kind is Kind.BOOL:
            equal = bool(_scalar(candidate)) == self._value
        elif kind is Kind.STRING:
            equal = str(candidate) == self._expected
        elif kind is Kind.BYTES:
            equal = bytes(candidate) == bytes(self._expected)  # type: ignore[arg-type]
        elif kind is Kind.ADDRESS:
            equal = _scalar(candidate) == _scalar(self._expected)
        elif kind is Kind.FUNCTION:
            # Bound methods compare their function and instance by identity.
            equal = candidate is self._expected or candidate == self._expected
        else:
            equal = candidate is self._expected
        return MatchResult.true() if equal else MatchResult.false()

    def _match_none(self, candidate: object, kind: Kind) -> MatchResult:
        if candidate is None or is_null_pointer(candidate):
            return MatchResult.true()
        if kind in REFERENCE_KINDS:
            return MatchResult.false()
        return MatchResult.undefined("which cannot be compared to None")

    def _match_pointer(self, candidate: object) -> MatchResult:
        expected = t.cast("ctypes._Pointer[t.Any]", self._expected)
        target = expected._type_
        if not isinstance(candidate, ctypes._Pointer) or candidate._type_ is not target:
            clause = f"which is not a pointer to {target.__name__}"
            return MatchResult.undefined(clause)
        if _same_pointer(candidate, expected):
            return MatchResult.true()
        return MatchResult.false()


def as_matcher(value: object) -> Matcher:
    """Return *value* unchanged if it is a matcher, else ``Equals(value)``."""
    if isinstance(value, Matcher):
        return value
    return Equals(value)


__all__ = ["Equals", "as_matcher"]
