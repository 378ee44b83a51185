"""Unit tests for shared helpers (initforge.utils).

Covers:
- configure_logging handler installation
- Project-relative path normalisation and parent directories
- Pascal-case name conversion
- Java identifier and package checks
- Package segment cleaning
- Duration formatting
"""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from initforge.errors import InvalidPathError
from initforge.utils import (
    clean_package_segment,
    configure_logging,
    format_duration,
    is_java_identifier,
    is_java_package,
    normalize_path,
    parent_directories,
    to_pascal,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_installs_single_rich_handler(self):
        logger = configure_logging("debug")
        configure_logging("debug")
        rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.name == "initforge"

    def test_accepts_numeric_level(self):
        logger = configure_logging(logging.WARNING)
        assert logger.level == logging.WARNING

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("INITFORGE_LOG_LEVEL", "error")
        logger = configure_logging()
        assert logger.level == logging.ERROR


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class TestNormalizePath:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("pom.xml", "pom.xml"),
            ("./src//main/../main/App.java", "src/main/App.java"),
            ("src\\main\\App.java", "src/main/App.java"),
        ],
    )
    def test_normalises(self, raw, expected):
        assert normalize_path(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "/etc/passwd", "../outside", "a/../../b", ".", "C:/x"])
    def test_rejects(self, raw):
        with pytest.raises(InvalidPathError):
            normalize_path(raw)


class TestParentDirectories:
    def test_nested(self):
        assert parent_directories("src/main/App.java") == ["src", "src/main"]

    def test_top_level_file(self):
        assert parent_directories("pom.xml") == []


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


class TestNames:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("my-demo", "MyDemo"),
            ("my_demo", "MyDemo"),
            ("my demo", "MyDemo"),
            ("myDemo", "MyDemo"),
            ("demo", "Demo"),
        ],
    )
    def test_to_pascal(self, raw, expected):
        assert to_pascal(raw) == expected


# ---------------------------------------------------------------------------
# Java identifiers
# ---------------------------------------------------------------------------


class TestJavaIdentifiers:
    def test_identifier(self):
        assert is_java_identifier("DemoApplication")
        assert is_java_identifier("_private")
        assert not is_java_identifier("1Demo")
        assert not is_java_identifier("class")
        assert not is_java_identifier("my-demo")

    def test_package(self):
        assert is_java_package("com.example.demo")
        assert not is_java_package("com.example.")
        assert not is_java_package("com.int.demo")
        assert not is_java_package("")

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("my-demo", "mydemo"),
            ("Demo", "demo"),
            ("2fast", "_2fast"),
            ("int", "_int"),
            ("---", ""),
        ],
    )
    def test_clean_package_segment(self, raw, expected):
        assert clean_package_segment(raw) == expected


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------


class TestFormatDuration:
    def test_milliseconds(self):
        assert format_duration(0.0123) == "12ms"

    def test_seconds(self):
        assert format_duration(3.7) == "3.7s"

    def test_minutes(self):
        assert format_duration(65.2) == "1m 5s"

    def test_negative(self):
        assert format_duration(-1) == "0ms"
