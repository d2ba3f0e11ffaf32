from __future__ import annotations

import logging

from issue_radar.logs import configure_logging, resolve_level


def test_resolve_level_accepts_names_and_numbers() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" WARNING ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR


def test_resolve_level_defaults_to_info() -> None:
    assert resolve_level("") == logging.INFO
    assert resolve_level("verbose") == logging.INFO
    assert resolve_level(None) == logging.INFO


def test_configure_logging_sets_package_logger_level() -> None:
    assert configure_logging("DEBUG") == logging.DEBUG
    assert logging.getLogger("issue_radar").level == logging.DEBUG
    configure_logging("INFO")
