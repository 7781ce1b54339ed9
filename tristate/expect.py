"""Per-test failure sink and the ``expect_that``/``assert_that`` entry points."""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import sys
import threading
import typing as t

from .errors import ExpectationFailedError, NoCurrentTestError
from .formatting import render
from .matcher import Matcher, MatchResult, Verdict

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import types

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class FailureRecord:
    """A single failed expectation.

    Parameters
    ----------
    file_name:
        Base name of the source file containing the expectation.
    line_number:
        Line of the ``expect_that`` call.
    generated_error:
        ``"Expected: ...\\nActual:   ..."`` text built from the matcher.
    user_error:
        Optional message supplied by the caller.
    """

    file_name: str
    line_number: int
    generated_error: str
    user_error: str = ""

    def format(self) -> str:
        """Return the record as ``file:line:`` followed by its messages."""
        lines = [f"{self.file_name}:{self.line_number}:", self.generated_error]
        if self.user_error:
            lines.append(self.user_error)
        return "\n".join(lines)


@dc.dataclass(slots=True)
class TestState:
    """State of the currently running test.

    Entering the state makes it current for the calling thread; leaving it
    restores whatever was current before, so states may be nested.
    """

    __test__: t.ClassVar[bool] = False

    suite_name: str = ""
    test_name: str = ""
    failure_records: list[FailureRecord] = dc.field(default_factory=list)
    _previous: TestState | None = dc.field(default=None, repr=False, compare=False)

    # Track the current state per thread to avoid cross-thread interference.
    _local: t.ClassVar[threading.local] = threading.local()

    @classmethod
    def current(cls) -> TestState | None:
        """Return the state active on this thread, if any."""
        return getattr(cls._local, "state", None)

    @classmethod
    def reset_current(cls) -> None:
        """Clear any active state for the current thread."""
        cls._local.state = None

    @classmethod
    def _set_current(cls, state: TestState | None) -> None:
        cls._local.state = state

    def __enter__(self) -> TestState:
        """Make this state current."""
        cls = type(self)
        self._previous = cls.current()
        cls._set_current(self)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Restore the previously current state."""
        type(self)._set_current(self._previous)
        self._previous = None

    @property
    def failed(self) -> bool:
        """Return ``True`` once any failure has been recorded."""
        return bool(self.failure_records)

    def add_failure(self, record: FailureRecord) -> None:
        """Append *record* to :attr:`failure_records`."""
        self.failure_records.append(record)


def format_failures(records: t.Iterable[FailureRecord]) -> str:
    """Render *records* as blank-line separated blocks."""
    return "\n\n".join(record.format() for record in records)


def _format_user_error(error_parts: tuple[object, ...]) -> str:
    if not error_parts:
        return ""
    fmt, *args = error_parts
    if not isinstance(fmt, str):
        msg = f"expect_that: invalid format string type {type(fmt).__name__}"
        raise TypeError(msg)
    return fmt % tuple(args) if args else fmt


def _caller_location(depth: int) -> tuple[str, int]:
    frame = sys._getframe(depth + 1)
    return os.path.basename(frame.f_code.co_filename), frame.f_lineno


def _generated_error(x: object, matcher: Matcher, result: MatchResult) -> str:
    clause = f", {result.clause}" if result.clause else ""
    return f"Expected: {matcher.describe()}\nActual:   {render(x)}{clause}"


def _evaluate(x: object, matcher: Matcher) -> MatchResult:
    result = matcher.match(x)
    verdict = getattr(result, "verdict", result)
    if not isinstance(verdict, Verdict):
        msg = f"expect_that: invalid matcher result {result!r}"
        raise TypeError(msg)
    return result


def expect_that(
    x: object, matcher: Matcher, *error_parts: object, stacklevel: int = 1
) -> bool:
    """Check *x* against *matcher*, recording a failure on mismatch.

    Parameters
    ----------
    x:
        The candidate value.
    matcher:
        Matcher to apply.
    error_parts:
        Optional printf-style format string followed by its arguments,
        recorded as the user message.
    stacklevel:
        Number of frames above the caller to report as the failure location.

    Returns
    -------
    bool
        ``True`` when the candidate matched.
    """
    user_error = _format_user_error(error_parts)
    state = TestState.current()
    if state is None:
        msg = "expect_that: no test state"
        raise NoCurrentTestError(msg)
    result = _evaluate(x, matcher)
    if result.verdict is Verdict.TRUE:
        return True
    file_name, line_number = _caller_location(stacklevel)
    record = FailureRecord(
        file_name=file_name,
        line_number=line_number,
        generated_error=_generated_error(x, matcher, result),
        user_error=user_error,
    )
    state.add_failure(record)
    logger.debug("Recorded expectation failure:\n%s", record.format())
    return False


def assert_that(
    x: object, matcher: Matcher, *error_parts: object, stacklevel: int = 1
) -> None:
    """Check *x* against *matcher* and raise on mismatch.

    A failure is also recorded when a :class:`TestState` is current.

    Raises
    ------
    ExpectationFailedError
        If the candidate does not match.
    """
    user_error = _format_user_error(error_parts)
    result = _evaluate(x, matcher)
    if result.verdict is Verdict.TRUE:
        return
    generated = _generated_error(x, matcher, result)
    state = TestState.current()
    if state is not None:
        file_name, line_number = _caller_location(stacklevel)
        state.add_failure(
            FailureRecord(file_name, line_number, generated, user_error)
        )
    raise ExpectationFailedError(generated, user_error)


__all__ = [
    "FailureRecord",
    "TestState",
    "assert_that",
    "expect_that",
    "format_failures",
]
