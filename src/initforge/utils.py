"""Shared helpers: logging setup, path and name checks, duration formatting."""

from __future__ import annotations

import logging
import posixpath
import re

from rich.console import Console
from rich.logging import RichHandler

from .config import GeneratorConfig
from .errors import InvalidPathError

console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Install a Rich handler on the ``initforge`` logger.

    When *level* is omitted it is taken from ``INITFORGE_LOG_LEVEL`` through
    :meth:`GeneratorConfig.from_env`.  Calling this more than once replaces
    the previously installed handler instead of stacking a new one.

    Returns:
        The configured package logger.
    """
    if level is None:
        level = GeneratorConfig.from_env().log_level
    logger = logging.getLogger("initforge")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def normalize_path(path: str) -> str:
    """Normalise *path* to a relative POSIX path inside the project.

    ``"./src//main/../main/App.java"`` -> ``"src/main/App.java"``.

    Raises:
        InvalidPathError: If the path is empty, absolute, or escapes the root.
    """
    raw = str(path).replace("\\", "/").strip()
    if not raw or raw.startswith("/") or (len(raw) > 1 and raw[1] == ":"):
        raise InvalidPathError(str(path))
    normalised = posixpath.normpath(raw)
    if normalised in (".", "") or normalised == ".." or normalised.startswith("../"):
        raise InvalidPathError(str(path))
    return normalised


def parent_directories(path: str) -> list[str]:
    """Every ancestor directory of a normalised *path*, shallowest first.

    ``"src/main/App.java"`` -> ``["src", "src/main"]``.
    """
    parts = path.split("/")[:-1]
    return ["/".join(parts[:depth]) for depth in range(1, len(parts) + 1)]


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def to_pascal(name: str) -> str:
    """Convert ``some-thing``, ``some_thing`` or ``some thing`` to ``SomeThing``.

    Words that are already mixed case keep their inner capitals, so
    ``"myDemo"`` becomes ``"MyDemo"``.
    """
    parts = re.split(r"[^a-zA-Z0-9]+", name)
    return "".join(word[0].upper() + word[1:] for word in parts if word)


# Java reserved words are not valid package segments or class names.
JAVA_KEYWORDS = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch",
        "char", "class", "const", "continue", "default", "do", "double",
        "else", "enum", "extends", "final", "finally", "float", "for", "goto",
        "if", "implements", "import", "instanceof", "int", "interface", "long",
        "native", "new", "package", "private", "protected", "public",
        "return", "short", "static", "strictfp", "super", "switch",
        "synchronized", "this", "throw", "throws", "transient", "try", "void",
        "volatile", "while", "true", "false", "null", "_",
    }
)

_JAVA_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_java_identifier(value: str) -> bool:
    """Return ``True`` if *value* is a legal, non-reserved Java identifier."""
    return bool(_JAVA_IDENTIFIER.match(value)) and value not in JAVA_KEYWORDS


def is_java_package(value: str) -> bool:
    """Return ``True`` if *value* is a dotted chain of Java identifiers."""
    return bool(value) and all(is_java_identifier(part) for part in value.split("."))


def clean_package_segment(value: str) -> str:
    """Turn a coordinate fragment into a usable package segment.

    Strips every character that is not legal inside a Java identifier and
    lower-cases the result. A leading digit or a reserved word gets an
    underscore so the segment stays compilable.
    """
    cleaned = re.sub(r"[^A-Za-z0-9_]", "", value).lower()
    if not cleaned:
        return ""
    if cleaned[0].isdigit() or cleaned in JAVA_KEYWORDS:
        cleaned = "_" + cleaned
    return cleaned


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.0123) -> "12ms"
        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0ms"
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"
