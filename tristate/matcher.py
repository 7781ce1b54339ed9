"""Core matcher protocol: verdicts, diagnostics and the :class:`Matcher` base.

A matcher answers a single question about a candidate value and produces a
three-valued :class:`Verdict`. ``UNDEFINED`` means the matcher does not accept
candidates of that kind at all, which lets wrapping matchers such as
:class:`~tristate.combinators.Not` propagate a type mismatch instead of
silently inverting it.
"""

from __future__ import annotations

import abc
import dataclasses as dc
import enum
import typing as t


class Verdict(enum.Enum):
    """Three-valued outcome of a match."""

    FALSE = 0
    TRUE = 1
    UNDEFINED = -1

    def __str__(self) -> str:
        """Return the bare member name."""
        return self.name


@dc.dataclass(slots=True, frozen=True)
class Diagnostic:
    """Relative clause explaining a non-``TRUE`` verdict.

    Parameters
    ----------
    clause:
        Text placed after the rendered candidate in a failure message, for
        example ``"which is not numeric"``. May be empty.
    fatal:
        ``True`` when the candidate is categorically wrong for the matcher
        (usually the wrong kind) rather than an ordinary mismatch.
    """

    clause: str = ""
    fatal: bool = False

    def __str__(self) -> str:
        """Return the clause text."""
        return self.clause


def new_fatal(clause: str) -> Diagnostic:
    """Return a fatal :class:`Diagnostic` carrying *clause*."""
    return Diagnostic(clause, fatal=True)


class MatchResult(t.NamedTuple):
    """Verdict paired with its diagnostic.

    ``diagnostic`` is ``None`` for ``TRUE`` and always a :class:`Diagnostic`
    otherwise, even when the clause is empty.
    """

    verdict: Verdict
    diagnostic: Diagnostic | None = None

    @classmethod
    def true(cls) -> MatchResult:
        """Return a successful result."""
        return cls(Verdict.TRUE, None)

    @classmethod
    def false(cls, clause: str = "") -> MatchResult:
        """Return an ordinary mismatch."""
        return cls(Verdict.FALSE, Diagnostic(clause))

    @classmethod
    def undefined(cls, clause: str) -> MatchResult:
        """Return a fatal kind mismatch."""
        return cls(Verdict.UNDEFINED, new_fatal(clause))

    @property
    def clause(self) -> str:
        """Return the diagnostic clause, or an empty string."""
        return "" if self.diagnostic is None else self.diagnostic.clause

    @property
    def fatal(self) -> bool:
        """Return whether the diagnostic is fatal."""
        return self.diagnostic is not None and self.diagnostic.fatal


class Matcher(abc.ABC):
    """Predicate over candidate values with an English description."""

    __slots__ = ()

    @abc.abstractmethod
    def describe(self) -> str:
        """Return a verb phrase describing the accepted values."""

    @abc.abstractmethod
    def match(self, candidate: object) -> MatchResult:
        """Return the verdict for *candidate* together with its diagnostic."""

    def matches(self, candidate: object) -> bool:
        """Return ``True`` when :meth:`match` yields ``TRUE``."""
        return self.match(candidate).verdict is Verdict.TRUE

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"<{type(self).__name__}: {self.describe()}>"


__all__ = [
    "Diagnostic",
    "MatchResult",
    "Matcher",
    "Verdict",
    "new_fatal",
]
