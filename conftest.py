"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

from tristate.expect import TestState

pytest_plugins = ("tristate.pytest_plugin",)


@pytest.fixture
def detached_state() -> t.Generator[TestState, None, None]:
    """Yield a nested ``TestState`` whose failures do not fail the test."""
    with TestState(suite_name="detached", test_name="detached") as state:
        yield state
