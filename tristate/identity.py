"""Exact-type matchers: strict equality, identity, deep equality and type."""

from __future__ import annotations

import ctypes
import dataclasses as dc
import typing as t

import numpy as np

from .errors import InvalidExpectedValueError
from .formatting import render
from .kinds import REFERENCE_KINDS, classify, type_name
from .matcher import Matcher, MatchResult, Verdict, new_fatal

_CONTAINERS = (tuple, list, set, frozenset)


def _contains(
    value: object,
    predicate: t.Callable[[object], bool],
    seen: set[int] | None = None,
) -> bool:
    """Return ``True`` if *value* or any nested element satisfies *predicate*.

    Containers and dataclass fields are searched; each object is visited once.
    """
    if predicate(value):
        return True
    seen = set() if seen is None else seen
    if id(value) in seen:
        return False
    seen.add(id(value))
    if isinstance(value, dict):
        return any(
            _contains(k, predicate, seen) or _contains(v, predicate, seen)
            for k, v in value.items()
        )
    if isinstance(value, _CONTAINERS):
        return any(_contains(item, predicate, seen) for item in value)
    if _is_struct(value):
        return any(
            _contains(getattr(value, f.name), predicate, seen)
            for f in dc.fields(value)  # type: ignore[arg-type]
        )
    return False


def _is_struct(value: object) -> bool:
    return dc.is_dataclass(value) and not isinstance(value, type)


def _is_array(value: object) -> bool:
    return isinstance(value, np.ndarray)


def _type_mismatch(candidate: object) -> MatchResult:
    return MatchResult.undefined(f"which is of type {type_name(candidate)}")


class StrictEquals(Matcher):
    """Match values of exactly ``type(expected)`` that compare ``==``.

    No numeric folding is applied: ``StrictEquals(17)`` rejects
    ``numpy.int8(17)`` and ``17.0``.
    """

    def __init__(self, expected: object) -> None:
        if _contains(expected, _is_array):
            msg = (
                "StrictEquals: invalid expected value; ndarray does not "
                "support == comparison"
            )
            raise InvalidExpectedValueError(msg)
        self._expected = expected
        self._type = type(expected)

    def describe(self) -> str:
        """Return ``"strictly equals <expected>"``."""
        return f"strictly equals {render(self._expected)}"

    def match(self, candidate: object) -> MatchResult:
        """Check the candidate's type, then its value."""
        if type(candidate) is not self._type:
            return _type_mismatch(candidate)
        if values_equal(candidate, self._expected):
            return MatchResult.true()
        return MatchResult.false()


class IdenticalTo(Matcher):
    """Match the very same object for reference values, equal values otherwise.

    Lists, dicts, arrays, functions, pointers and plain objects must be the
    same object as ``expected``. Scalars, strings and tuples must have the
    same type and compare equal.
    """

    def __init__(self, expected: object) -> None:
        if _contains(expected, _is_struct):
            msg = (
                f"IdenticalTo: invalid expected value of type {type_name(expected)}; "
                "dataclass instances are not supported"
            )
            raise InvalidExpectedValueError(msg)
        self._expected = expected
        self._type = type(expected)
        self._by_reference = (
            classify(expected) in REFERENCE_KINDS or _is_array(expected)
        )
        if not self._by_reference and _contains(expected, _is_array):
            msg = (
                f"IdenticalTo: invalid expected value of type {type_name(expected)}; "
                "ndarray elements are not supported"
            )
            raise InvalidExpectedValueError(msg)

    def describe(self) -> str:
        """Return ``"identical to <type> <expected>"``."""
        return f"identical to <{self._type.__name__}> {render(self._expected)}"

    def match(self, candidate: object) -> MatchResult:
        """Compare by identity or by value depending on the expected kind."""
        if type(candidate) is not self._type:
            return _type_mismatch(candidate)
        if self._by_reference:
            same = candidate is self._expected
        else:
            same = values_equal(candidate, self._expected)
        return MatchResult.true() if same else MatchResult.false()


def _has_default_eq(value: object) -> bool:
    return type(value).__eq__ is object.__eq__


_Seen = dict[tuple[int, int], tuple[object, object]]


def _deep_equal(  # noqa: C901, PLR0911 - one branch per structural shape
    a: t.Any, b: t.Any, seen: _Seen
) -> bool:
    if type(a) is not type(b):
        return False
    if a is b:
        return True
    key = (id(a), id(b))
    if key in seen:
        return True
    if isinstance(a, np.ndarray):
        return a.shape == b.shape and a.dtype == b.dtype and bool(np.array_equal(a, b))
    if isinstance(a, ctypes._Pointer):
        if not a or not b:
            return not a and not b
        return _deep_equal(a.contents, b.contents, seen)
    if isinstance(a, ctypes._SimpleCData):
        return a.value == b.value
    # Holding both operands keeps their ids from being reused mid-walk.
    seen[key] = (a, b)
    if isinstance(a, (ctypes.Structure, ctypes.Union)):
        return all(
            _deep_equal(getattr(a, name), getattr(b, name), seen)
            for name, *_ in a._fields_
        )
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(_deep_equal(a[k], b[k], seen) for k in a)
    if isinstance(a, (list, tuple, ctypes.Array)):
        return len(a) == len(b) and all(
            _deep_equal(x, y, seen) for x, y in zip(a, b, strict=True)
        )
    if _is_struct(a):
        return all(
            _deep_equal(getattr(a, f.name), getattr(b, f.name), seen)
            for f in dc.fields(a)
        )
    if _has_default_eq(a) and hasattr(a, "__dict__"):
        return _deep_equal(vars(a), vars(b), seen)
    return bool(a == b)


def deep_equal(a: object, b: object) -> bool:
    """Return ``True`` when *a* and *b* are structurally equal.

    Types must agree at every level. Dicts compare by key set and values,
    sequences element-wise, dataclasses field-wise, ctypes pointers through
    their targets and plain objects through their attributes. Reference
    cycles are followed once.
    """
    return _deep_equal(a, b, {})


def values_equal(a: object, b: object) -> bool:
    """Return ``a == b`` for operands that may hold numpy arrays.

    Operands with arrays inside containers or dataclass fields are compared
    with :func:`deep_equal`. An element-wise result from a custom ``__eq__``
    counts as unequal.
    """
    if _contains(a, _is_array) or _contains(b, _is_array):
        return deep_equal(a, b)
    result = a == b
    if isinstance(result, np.ndarray):
        return False
    return bool(result)


class DeepEquals(Matcher):
    """Match values of the same type that are structurally equal to ``expected``."""

    def __init__(self, expected: object) -> None:
        self._expected = expected
        self._type = type(expected)

    def describe(self) -> str:
        """Return ``"deep equals: <expected>"``."""
        return f"deep equals: {render(self._expected)}"

    def match(self, candidate: object) -> MatchResult:
        """Reject other types outright, then compare structurally."""
        if type(candidate) is not self._type:
            return MatchResult(
                Verdict.FALSE, new_fatal(f"which is of type {type_name(candidate)}")
            )
        if deep_equal(self._expected, candidate):
            return MatchResult.true()
        return MatchResult.false()


class HasSameTypeAs(Matcher):
    """Match values whose type is exactly ``type(example)``."""

    def __init__(self, example: object) -> None:
        self._type = type(example)

    def describe(self) -> str:
        """Return ``"has type <name>"``."""
        return f"has type {self._type.__name__}"

    def match(self, candidate: object) -> MatchResult:
        """Compare the candidate's type with the example's."""
        if type(candidate) is self._type:
            return MatchResult.true()
        return MatchResult.false(f"which has type {type_name(candidate)}")


__all__ = [
    "DeepEquals",
    "HasSameTypeAs",
    "IdenticalTo",
    "StrictEquals",
    "deep_equal",
    "values_equal",
]
