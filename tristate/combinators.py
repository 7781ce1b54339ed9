"""Matchers built from other matchers.

All combinators evaluate their children in declaration order and keep the
three-valued algebra intact: ``UNDEFINED`` from a child is never turned into
a plain ``TRUE``.
"""

from __future__ import annotations

import ctypes
import inspect
import typing as t

import numpy as np

from .equals import as_matcher
from .formatting import render
from .matcher import Diagnostic, Matcher, MatchResult, Verdict

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import collections.abc as cabc


class Not(Matcher):
    """Invert ``TRUE`` and ``FALSE``; pass ``UNDEFINED`` through unchanged."""

    def __init__(self, matcher: object) -> None:
        self.matcher = as_matcher(matcher)

    def describe(self) -> str:
        """Return ``"not(<inner description>)"``."""
        return f"not({self.matcher.describe()})"

    def match(self, candidate: object) -> MatchResult:
        """Flip the wrapped verdict."""
        result = self.matcher.match(candidate)
        if result.verdict is Verdict.TRUE:
            return MatchResult.false()
        if result.verdict is Verdict.FALSE:
            return MatchResult.true()
        return result


class AllOf(Matcher):
    """Match candidates accepted by every wrapped matcher.

    A child that is ``FALSE``, or that fails with a non-fatal diagnostic, makes
    the result ``FALSE``; only fatal ``UNDEFINED`` children give ``UNDEFINED``.
    The reported diagnostic is the first fatal one among the non-matching
    children, falling back to the first non-empty clause.
    """

    def __init__(self, *matchers: object) -> None:
        self.matchers = tuple(as_matcher(m) for m in matchers)

    def describe(self) -> str:
        """Join the child descriptions with ``", and "``."""
        if not self.matchers:
            return "is anything"
        return ", and ".join(m.describe() for m in self.matchers)

    def match(self, candidate: object) -> MatchResult:
        """Evaluate every child, then fold the verdicts."""
        failures = [
            result
            for result in (m.match(candidate) for m in self.matchers)
            if result.verdict is not Verdict.TRUE
        ]
        if not failures:
            return MatchResult.true()
        if all(r.verdict is Verdict.UNDEFINED and r.fatal for r in failures):
            return failures[0]
        fatal = next((r.diagnostic for r in failures if r.fatal), None)
        if fatal is not None:
            return MatchResult(Verdict.FALSE, fatal)
        clause = next((r.clause for r in failures if r.clause), "")
        return MatchResult.false(clause)


class AnyOf(Matcher):
    """Match candidates accepted by at least one of ``values``.

    Values that are not matchers are compared with
    :class:`~tristate.equals.Equals`.
    """

    def __init__(self, *values: object) -> None:
        self.matchers = tuple(as_matcher(v) for v in values)

    def describe(self) -> str:
        """Return ``"or(d1, d2, ...)"``."""
        return "or(" + ", ".join(m.describe() for m in self.matchers) + ")"

    def match(self, candidate: object) -> MatchResult:
        """Return the first ``TRUE``, else the first ``UNDEFINED``."""
        first_undefined: MatchResult | None = None
        for matcher in self.matchers:
            result = matcher.match(candidate)
            if result.verdict is Verdict.TRUE:
                return result
            if result.verdict is Verdict.UNDEFINED and first_undefined is None:
                first_undefined = result
        if first_undefined is not None:
            return first_undefined
        return MatchResult.false()


class Pointee(Matcher):
    """Apply ``matcher`` to the target of a non-null ctypes pointer."""

    def __init__(self, matcher: object) -> None:
        self.matcher = as_matcher(matcher)

    def describe(self) -> str:
        """Return ``"pointee(<inner description>)"``."""
        return f"pointee({self.matcher.describe()})"

    def match(self, candidate: object) -> MatchResult:
        """Dereference *candidate* once and delegate."""
        if not isinstance(candidate, ctypes._Pointer):
            return MatchResult.undefined("which is not a pointer")
        if not candidate:
            return MatchResult.undefined("which is a nil pointer")
        return self.matcher.match(candidate.contents)


def _is_sequence(candidate: object) -> bool:
    if isinstance(candidate, np.ndarray):
        # 0-d arrays are scalars with no length.
        return candidate.ndim > 0
    return isinstance(candidate, (list, tuple))


def _elements(candidate: object) -> cabc.Sequence[object]:
    return t.cast("cabc.Sequence[object]", candidate)


class ElementsAre(Matcher):
    """Match sequences whose elements match ``values`` position by position."""

    def __init__(self, *values: object) -> None:
        self.matchers = tuple(as_matcher(v) for v in values)

    def describe(self) -> str:
        """Return ``"elements are: [d1, d2, ...]"``."""
        inner = ", ".join(m.describe() for m in self.matchers)
        return f"elements are: [{inner}]"

    def match(self, candidate: object) -> MatchResult:
        """Check the length, then each position in order."""
        if not _is_sequence(candidate):
            return MatchResult.undefined("which is not an array or slice")
        elements = _elements(candidate)
        if len(elements) != len(self.matchers):
            return MatchResult.false(f"which is of length {len(elements)}")

        first_failure: tuple[int, MatchResult] | None = None
        first_fatal: tuple[int, MatchResult] | None = None
        for index, (matcher, element) in enumerate(
            zip(self.matchers, elements, strict=True)
        ):
            result = matcher.match(element)
            if result.verdict is Verdict.TRUE:
                continue
            if first_failure is None:
                first_failure = (index, result)
            if result.fatal and first_fatal is None:
                first_fatal = (index, result)

        if first_failure is None:
            return MatchResult.true()
        if first_fatal is not None:
            index, result = first_fatal
            return MatchResult.undefined(_element_clause(index, result))
        index, result = first_failure
        return MatchResult.false(_element_clause(index, result))


def _element_clause(index: int, result: MatchResult) -> str:
    clause = f"whose element {index} doesn't match"
    if result.clause:
        clause = f"{clause}, {result.clause}"
    return clause


class Contains(Matcher):
    """Match sequences with at least one element matching ``value``."""

    def __init__(self, value: object) -> None:
        self.matcher = as_matcher(value)

    def describe(self) -> str:
        """Return ``"contains: <inner description>"``."""
        return f"contains: {self.matcher.describe()}"

    def match(self, candidate: object) -> MatchResult:
        """Scan the elements for a match."""
        if not _is_sequence(candidate):
            return MatchResult.undefined("which is not an array or slice")
        for element in _elements(candidate):
            if self.matcher.matches(element):
                return MatchResult.true()
        return MatchResult.false()


def _takes_no_arguments(candidate: object) -> bool:
    if not callable(candidate):
        return False
    try:
        signature = inspect.signature(candidate)
    except (TypeError, ValueError):
        # Some builtins expose no signature; let the call itself decide.
        return True
    try:
        signature.bind()
    except TypeError:
        return False
    return True


def _render_payload(exc: Exception) -> str:
    """Render the value an exception was raised with, or the exception itself."""
    if len(exc.args) == 1:
        return render(exc.args[0])
    return repr(exc)


class Panics(Matcher):
    """Call a zero-argument callable and match the exception it raises.

    The raised exception instance is the payload handed to ``matcher``. Failure
    clauses show the value it was raised with, so ``raise ValueError(17)``
    renders as ``17``.
    Exceptions outside :class:`Exception`, such as ``KeyboardInterrupt``,
    propagate.
    """

    def __init__(self, matcher: object) -> None:
        self.matcher = as_matcher(matcher)

    def describe(self) -> str:
        """Return ``"panics with: <inner description>"``."""
        return f"panics with: {self.matcher.describe()}"

    def match(self, candidate: object) -> MatchResult:
        """Invoke *candidate* and inspect what it raises."""
        if not _takes_no_arguments(candidate):
            return MatchResult.undefined("which is not a zero-arg function")
        func = t.cast("t.Callable[[], object]", candidate)
        try:
            func()
        except Exception as exc:  # noqa: BLE001 - any error is the payload
            payload = exc
        else:
            return MatchResult.false("which didn't panic")

        result = self.matcher.match(payload)
        if result.verdict is Verdict.TRUE:
            return result
        clause = f"which panicked with: {_render_payload(payload)}"
        if result.clause:
            clause = f"{clause}, {result.clause}"
        return MatchResult(result.verdict, Diagnostic(clause, fatal=result.fatal))


__all__ = [
    "AllOf",
    "AnyOf",
    "Contains",
    "ElementsAre",
    "Not",
    "Pointee",
    "Panics",
]
