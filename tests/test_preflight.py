"""Tests for the startup environment checks."""

import pytest

from src.core.config import DEFAULT_CONFIG
from src.core.preflight import parse_kernel_version, run_preflight


@pytest.mark.parametrize("release,expected", [
    ("6.1.0-13-amd64", (6, 1, 0)),
    ("5.15.0", (5, 15, 0)),
    ("4.19", (4, 19, 0)),
    ("3", (3, 0, 0)),
    ("6.18.44-fc-v139", (6, 18, 44)),
    ("unknown", None),
])
def test_parse_kernel_version(release, expected):
    assert parse_kernel_version(release) == expected


def test_all_checks_pass(make_handler, make_tool_manager):
    result = run_preflight(make_handler({}), make_tool_manager(), DEFAULT_CONFIG)

    assert result.passed
    assert [check.name for check in result.checks] == ["system", "kernel", "tools", "privilege"]
    assert result.first_failure is None


def test_wrong_operating_system(make_handler, make_tool_manager):
    result = run_preflight(make_handler({}, system="Darwin"), make_tool_manager(), DEFAULT_CONFIG)

    assert not result.passed
    assert result.first_failure.name == "system"
    assert "Darwin" in result.first_failure.message
    # Fails fast: nothing after the first failed check runs
    assert len(result.checks) == 1


def test_old_kernel(make_handler, make_tool_manager):
    config = dict(DEFAULT_CONFIG, min_kernel_version="5.4")

    result = run_preflight(make_handler({}, kernel="4.19.0-21-amd64"), make_tool_manager(), config)

    assert result.first_failure.name == "kernel"
    assert "too old" in result.first_failure.message


def test_unparseable_kernel(make_handler, make_tool_manager):
    result = run_preflight(make_handler({}, kernel="custom"), make_tool_manager(), DEFAULT_CONFIG)

    assert result.first_failure.name == "kernel"


def test_missing_hdparm(make_handler, make_tool_manager):
    result = run_preflight(make_handler({}), make_tool_manager(available=()), DEFAULT_CONFIG)

    failure = result.first_failure
    assert failure.name == "tools"
    assert "This tool requires hdparm" in failure.message
    assert "hdparm" in failure.message.split("(", 1)[1]


def test_not_root(make_handler, make_tool_manager):
    result = run_preflight(make_handler({}, privileged=False), make_tool_manager(), DEFAULT_CONFIG)

    assert result.first_failure.name == "privilege"
    assert result.first_failure.message == "This tool must be run as root or with sudo"
    assert [check.passed for check in result.checks] == [True, True, True, False]
