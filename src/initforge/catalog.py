"""Read-only dependency metadata catalog.

The catalog is an in-memory snapshot loaded before any request is served.
The engine only ever reads it: conditions look up facets, the dependency
customizer turns requested ids into build coordinates, and validation checks
compatibility ranges.  Refreshing the snapshot (e.g. from a remote service)
is the job of the hosting application, which swaps in a new instance.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .description.version import InvalidVersionError, VersionRange

logger = logging.getLogger(__name__)

_BUNDLED_CATALOG = "catalog.yaml"


class DependencyScope:
    """Scopes understood by the build-file writers."""

    COMPILE = "compile"
    RUNTIME = "runtime"
    COMPILE_ONLY = "compile_only"
    ANNOTATION_PROCESSOR = "annotation_processor"
    PROVIDED = "provided"
    TEST = "test"

    ALL = (COMPILE, RUNTIME, COMPILE_ONLY, ANNOTATION_PROCESSOR, PROVIDED, TEST)


class Link(BaseModel):
    """A documentation or guide link attached to a dependency."""

    model_config = ConfigDict(frozen=True)

    rel: str = Field(default="reference")
    href: str
    description: str = Field(default="")


class DependencyMetadata(BaseModel):
    """Catalog entry for one selectable dependency."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(default="")
    description: str = Field(default="")
    group_id: str
    artifact_id: str
    version: Optional[str] = Field(default=None, description="Explicit version; managed by the platform when unset")
    scope: str = Field(default=DependencyScope.COMPILE)
    facets: tuple[str, ...] = Field(default_factory=tuple)
    compatibility_range: Optional[str] = Field(default=None)
    links: tuple[Link, ...] = Field(default_factory=tuple)

    @field_validator("scope")
    @classmethod
    def _check_scope(cls, value: str) -> str:
        if value not in DependencyScope.ALL:
            raise ValueError(f"Unknown scope {value!r}; expected one of {', '.join(DependencyScope.ALL)}")
        return value

    @field_validator("compatibility_range")
    @classmethod
    def _check_range(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                VersionRange.parse(value)
            except InvalidVersionError as exc:
                raise ValueError(str(exc)) from exc
        return value

    def is_compatible_with(self, platform_version: str) -> bool:
        """Return ``True`` when *platform_version* is within the compatibility range."""
        if self.compatibility_range is None:
            return True
        return platform_version in VersionRange.parse(self.compatibility_range)


class BuildSettings(BaseModel):
    """Tool versions written into generated build files."""

    model_config = ConfigDict(frozen=True)

    dependency_management_plugin_version: str = Field(default="1.1.4")
    kotlin_version: str = Field(default="1.9.21")
    maven_version: str = Field(default="3.9.6")
    maven_wrapper_version: str = Field(default="3.2.0")
    gradle_version: str = Field(default="8.5")


class MetadataCatalog(BaseModel):
    """Immutable snapshot of selectable dependencies and platform settings."""

    model_config = ConfigDict(frozen=True)

    platform_versions: tuple[str, ...] = Field(default_factory=tuple)
    java_versions: tuple[str, ...] = Field(default_factory=lambda: ("17", "21"))
    build: BuildSettings = Field(default_factory=BuildSettings)
    dependencies: tuple[DependencyMetadata, ...] = Field(default_factory=tuple)

    @field_validator("dependencies")
    @classmethod
    def _unique_ids(cls, value: tuple[DependencyMetadata, ...]) -> tuple[DependencyMetadata, ...]:
        seen: set[str] = set()
        for dep in value:
            if dep.id in seen:
                raise ValueError(f"Duplicate dependency id in catalog: {dep.id!r}")
            seen.add(dep.id)
        return value

    # -- Lookup ------------------------------------------------------------

    def resolve_dependency(self, dependency_id: str) -> Optional[DependencyMetadata]:
        """Return the entry for *dependency_id*, or ``None`` if unknown."""
        for dep in self.dependencies:
            if dep.id == dependency_id:
                return dep
        return None

    def ids(self) -> list[str]:
        return [dep.id for dep in self.dependencies]

    def has_facet(self, dependency_ids: tuple[str, ...] | list[str], facet: str) -> bool:
        """Return ``True`` if any of *dependency_ids* carries *facet*."""
        for dependency_id in dependency_ids:
            dep = self.resolve_dependency(dependency_id)
            if dep is not None and facet in dep.facets:
                return True
        return False

    # -- Loading -----------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetadataCatalog":
        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MetadataCatalog":
        """Load a catalog from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            pydantic.ValidationError: If the content is not a valid catalog.
        """
        raw = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(raw) or {}
        catalog = cls.from_dict(data)
        logger.debug("Loaded catalog %s with %d dependencies", path, len(catalog.dependencies))
        return catalog

    @classmethod
    def default(cls) -> "MetadataCatalog":
        """Load the catalog bundled with the package."""
        raw = resources.files("initforge").joinpath(_BUNDLED_CATALOG).read_text(encoding="utf-8")
        return cls.from_dict(yaml.safe_load(raw) or {})
