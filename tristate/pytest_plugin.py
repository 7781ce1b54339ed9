"""Pytest plugin that runs every test inside a :class:`~tristate.expect.TestState`.

Failures recorded with :func:`~tristate.expect.expect_that` do not stop the
test body. Once the body has finished, the plugin turns any recorded
failures into a failed report.
"""

from __future__ import annotations

import logging
import typing as t

import pytest

from .expect import TestState, format_failures

logger = logging.getLogger(__name__)

REPORT_SECTION = "tristate expectations"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("tristate")
    group.addoption(
        "--tristate-report-failures",
        action="store_true",
        dest="tristate_report_failures",
        default=None,
        help=(
            "Fail tests that recorded expect_that() failures. "
            "Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-tristate-report-failures",
        action="store_false",
        dest="tristate_report_failures",
        default=None,
        help=(
            "Only attach recorded expect_that() failures to the report "
            "without failing the test. Overrides the pytest.ini setting."
        ),
    )
    parser.addini(
        "tristate_report_failures",
        "Fail tests that recorded expect_that() failures.",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "tristate(report_failures: bool = True): override whether recorded "
            "expectation failures fail a single test."
        ),
    )


class _TristateItem(t.Protocol):
    """pytest item carrying tristate state."""

    _tristate_state: TestState | None
    _tristate_report_failures: bool


def _report_failures_enabled(item: pytest.Item) -> bool:
    """Return whether recorded failures should fail the test."""
    # Priority order: marker > CLI option > INI setting
    marker = item.get_closest_marker("tristate")
    if marker is not None and "report_failures" in marker.kwargs:
        return bool(marker.kwargs["report_failures"])

    config = item.config
    cli_value = config.getoption("tristate_report_failures")
    if cli_value is not None:
        return bool(cli_value)

    return bool(config.getini("tristate_report_failures"))


def _suite_name(item: pytest.Item) -> str:
    """Return the enclosing class name, or the module name."""
    cls = getattr(item, "cls", None)
    if cls is not None:
        return cls.__name__
    module = getattr(item, "module", None)
    if module is not None:
        return module.__name__
    return item.nodeid.split("::", 1)[0]


@pytest.fixture(autouse=True)
def tristate_state(
    request: pytest.FixtureRequest,
) -> t.Generator[TestState, None, None]:
    """Provide the :class:`TestState` that is current during the test."""
    item = t.cast("_TristateItem", request.node)
    state = TestState(
        suite_name=_suite_name(request.node), test_name=request.node.name
    )
    item._tristate_state = state
    item._tristate_report_failures = _report_failures_enabled(request.node)
    with state:
        yield state


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[t.Any]
) -> t.Generator[None, None, None]:
    """Fail the call report of tests that recorded expectation failures."""
    del call
    outcome = yield
    rep = outcome.get_result()
    if rep.when != "call":
        return
    state: TestState | None = getattr(item, "_tristate_state", None)
    if state is None or not state.failed:
        return
    text = format_failures(state.failure_records)
    should_fail = getattr(item, "_tristate_report_failures", True)
    if rep.failed or not should_fail:
        rep.sections.append((REPORT_SECTION, text))
        return
    logger.debug(
        "Failing %s with %d recorded expectation failure(s)",
        item.nodeid,
        len(state.failure_records),
    )
    rep.outcome = "failed"
    rep.longrepr = text
