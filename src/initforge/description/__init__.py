"""Project description model: the immutable input of one generation."""

from .models import JAR, WAR, BuildDialect, BuildSystem, Language, ProjectDescription
from .version import InvalidVersionError, Version, VersionRange

__all__ = [
    "BuildDialect",
    "BuildSystem",
    "InvalidVersionError",
    "JAR",
    "Language",
    "ProjectDescription",
    "Version",
    "VersionRange",
    "WAR",
]
