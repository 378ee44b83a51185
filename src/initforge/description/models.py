"""Pydantic v2 models describing the project to generate.

A ``ProjectDescription`` is frozen: once built by the request layer it is
passed, read-only, through one generation run.  Derive a variant with
``description.model_copy(update={...})``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Language(str, Enum):
    """JVM language of the generated sources."""

    JAVA = "java"
    KOTLIN = "kotlin"
    GROOVY = "groovy"

    @property
    def source_extension(self) -> str:
        return {"java": "java", "kotlin": "kt", "groovy": "groovy"}[self.value]


class BuildSystem(str, Enum):
    """Build tool of the generated project."""

    MAVEN = "maven"
    GRADLE = "gradle"


class BuildDialect(str, Enum):
    """Gradle script dialect. Ignored for Maven."""

    GROOVY = "groovy"
    KOTLIN = "kotlin"


JAR = "jar"
WAR = "war"


# ---------------------------------------------------------------------------
# Project description
# ---------------------------------------------------------------------------


class ProjectDescription(BaseModel):
    """Full input of one generation request."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., description="Maven group id, e.g. 'com.example'")
    artifact_id: str = Field(..., description="Maven artifact id, e.g. 'demo'")
    version: str = Field(default="0.0.1-SNAPSHOT")
    name: str = Field(default="", description="Human-readable project name")
    description: str = Field(default="")
    package_name: str = Field(..., description="Root package of the generated sources")
    application_name: str = Field(..., description="Main class name, e.g. 'DemoApplication'")
    language: Language = Field(default=Language.JAVA)
    java_version: str = Field(default="17")
    build_system: BuildSystem = Field(default=BuildSystem.MAVEN)
    build_dialect: BuildDialect = Field(default=BuildDialect.GROOVY)
    packaging: str = Field(default=JAR, description="Packaging identifier, e.g. 'jar' or 'war'")
    platform_version: str = Field(..., description="Platform (Spring Boot) version")
    dependencies: tuple[str, ...] = Field(default_factory=tuple)
    base_directory: Optional[str] = Field(
        default=None, description="Directory prefix for archive entries"
    )

    @field_validator("packaging")
    @classmethod
    def _normalise_packaging(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("dependencies", mode="before")
    @classmethod
    def _dedupe_dependencies(cls, value: object) -> object:
        if isinstance(value, str):
            value = [part for part in value.split(",")]
        if isinstance(value, (list, tuple)):
            seen: dict[str, None] = {}
            for item in value:
                ident = str(item).strip()
                if ident:
                    seen.setdefault(ident, None)
            return tuple(seen)
        return value

    # -- Convenience -------------------------------------------------------

    @property
    def package_path(self) -> str:
        """The package name as a POSIX directory path."""
        return self.package_name.replace(".", "/")

    @property
    def is_gradle_kotlin_dsl(self) -> bool:
        return self.build_system is BuildSystem.GRADLE and self.build_dialect is BuildDialect.KOTLIN

    def has_dependency(self, dependency_id: str) -> bool:
        return dependency_id in self.dependencies
