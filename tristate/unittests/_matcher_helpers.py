"""Shared helpers for matcher unit tests."""

from __future__ import annotations

import dataclasses as dc

from tristate.matcher import Diagnostic, Matcher, MatchResult, Verdict


@dc.dataclass(slots=True, frozen=True)
class MatchCase:
    """Candidate together with the result a matcher should produce."""

    candidate: object
    verdict: Verdict
    clause: str = ""
    fatal: bool = False


def true_case(candidate: object) -> MatchCase:
    """Return a case expecting ``TRUE``."""
    return MatchCase(candidate, Verdict.TRUE)


def false_case(candidate: object, clause: str = "") -> MatchCase:
    """Return a case expecting a plain ``FALSE``."""
    return MatchCase(candidate, Verdict.FALSE, clause)


def undefined_case(candidate: object, clause: str) -> MatchCase:
    """Return a case expecting a fatal ``UNDEFINED``."""
    return MatchCase(candidate, Verdict.UNDEFINED, clause, fatal=True)


def check_case(matcher: Matcher, case: MatchCase) -> None:
    """Assert that *matcher* produces the result described by *case*."""
    result = matcher.match(case.candidate)
    assert result.verdict is case.verdict, (
        f"{matcher!r} on {case.candidate!r}: expected {case.verdict}, "
        f"got {result.verdict} ({result.clause!r})"
    )
    if case.verdict is Verdict.TRUE:
        assert result.diagnostic is None
        return
    assert result.diagnostic is not None
    assert result.clause == case.clause
    assert result.fatal is case.fatal


class FakeMatcher(Matcher):
    """Matcher returning a canned result regardless of the candidate."""

    def __init__(
        self,
        description: str = "",
        verdict: Verdict = Verdict.TRUE,
        clause: str = "",
        *,
        fatal: bool = False,
    ) -> None:
        self.description = description
        self.verdict = verdict
        self.clause = clause
        self.fatal = fatal
        self.calls: list[object] = []

    def describe(self) -> str:
        """Return the canned description."""
        return self.description

    def match(self, candidate: object) -> MatchResult:
        """Record *candidate* and return the canned result."""
        self.calls.append(candidate)
        if self.verdict is Verdict.TRUE:
            return MatchResult.true()
        return MatchResult(self.verdict, Diagnostic(self.clause, fatal=self.fatal))
