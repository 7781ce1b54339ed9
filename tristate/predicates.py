"""Simple matchers over strings and exceptions."""

from __future__ import annotations

import re

from .formatting import quote
from .matcher import Matcher, MatchResult


class HasSubstr(Matcher):
    """Match strings containing ``substring``."""

    def __init__(self, substring: str) -> None:
        self.substring = substring

    def describe(self) -> str:
        """Return ``has substring "<substring>"``."""
        return f"has substring {quote(self.substring)}"

    def match(self, candidate: object) -> MatchResult:
        """Return ``TRUE`` if ``substring`` is in *candidate*."""
        if not isinstance(candidate, str):
            return MatchResult.undefined("which is not a string")
        if self.substring in candidate:
            return MatchResult.true()
        return MatchResult.false()


class MatchesRegexp(Matcher):
    """Match strings or bytes in which ``pattern`` finds a match.

    The pattern is compiled immediately, so an invalid pattern raises
    :class:`re.error` at construction. Matching is unanchored.
    """

    def __init__(self, pattern: str) -> None:
        self._pattern = re.compile(pattern)

    def describe(self) -> str:
        """Return ``matches regexp "<pattern>"``."""
        return f"matches regexp {quote(self._pattern.pattern)}"

    def match(self, candidate: object) -> MatchResult:
        """Search *candidate* for the pattern."""
        if isinstance(candidate, (bytes, bytearray, memoryview)):
            text = bytes(candidate).decode("utf-8", errors="surrogateescape")
        elif isinstance(candidate, str):
            text = candidate
        else:
            return MatchResult.undefined("which is not a string or bytes")
        if self._pattern.search(text):
            return MatchResult.true()
        return MatchResult.false()


class Error(Matcher):
    """Match exceptions whose message satisfies ``matcher``."""

    def __init__(self, matcher: Matcher) -> None:
        self.matcher = matcher

    def describe(self) -> str:
        """Return ``"error <inner description>"``."""
        return f"error {self.matcher.describe()}"

    def match(self, candidate: object) -> MatchResult:
        """Apply the wrapped matcher to ``str(candidate)``."""
        if not isinstance(candidate, BaseException):
            return MatchResult.undefined("which is not an error")
        return self.matcher.match(str(candidate))


__all__ = ["Error", "HasSubstr", "MatchesRegexp"]
