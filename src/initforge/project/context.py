"""Per-request generation state.

``GenerationContext`` is the only mutable state of a generation run.  It is
created by the orchestrator for a single request, passed by reference to
every active contributor, and discarded afterwards.  It holds:

- the frozen ``ProjectDescription`` and the request's ``ContributorRegistry``;
- the ``Build`` model that customizers mutate and build-file writers render;
- the ``ProjectTree`` of ``ArchiveEntry`` objects that forms the project.
"""

from __future__ import annotations

import logging
import stat
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..catalog import BuildSettings, DependencyScope, MetadataCatalog
from ..description.models import Language, ProjectDescription
from ..errors import DuplicateEntryError, GenerationTimeoutError, InvalidPathError
from ..registry import ContributorRegistry
from ..utils import normalize_path, parent_directories

logger = logging.getLogger(__name__)

DEFAULT_MODE = 0o644
EXECUTABLE_MODE = 0o755


# ---------------------------------------------------------------------------
# Archive entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArchiveEntry:
    """One file of the generated project."""

    path: str
    content: bytes
    executable: bool = False

    @classmethod
    def of(cls, path: str, content: str | bytes, executable: bool = False) -> "ArchiveEntry":
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        return cls(path=normalize_path(path), content=data, executable=executable)

    @property
    def mode(self) -> int:
        return EXECUTABLE_MODE if self.executable else DEFAULT_MODE

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


class ProjectTree:
    """In-memory working tree: normalised path -> ``ArchiveEntry``."""

    def __init__(self) -> None:
        self._entries: dict[str, ArchiveEntry] = {}
        self._owners: dict[str, Optional[str]] = {}

    def add(
        self,
        path: str,
        content: str | bytes,
        *,
        executable: bool = False,
        overwrite: bool = False,
        owner: Optional[str] = None,
    ) -> ArchiveEntry:
        """Add a file to the tree.

        Raises:
            DuplicateEntryError: If the path exists and *overwrite* is false,
                or if it clashes with the directory of another entry.
            InvalidPathError: If the path is not a valid relative path.
        """
        entry = ArchiveEntry.of(path, content, executable)
        if entry.path in self._entries:
            if not overwrite:
                raise DuplicateEntryError(entry.path, owner)
        elif self._clashes_with_directory(entry.path):
            raise DuplicateEntryError(entry.path, owner)
        self._entries[entry.path] = entry
        self._owners[entry.path] = owner
        return entry

    def _clashes_with_directory(self, path: str) -> bool:
        # A file cannot live where another entry needs a directory, nor below another file.
        if any(parent in self._entries for parent in parent_directories(path)):
            return True
        prefix = path + "/"
        return any(existing.startswith(prefix) for existing in self._entries)

    def get(self, path: str) -> Optional[ArchiveEntry]:
        return self._entries.get(normalize_path(path))

    def remove(self, path: str) -> None:
        key = normalize_path(path)
        self._entries.pop(key, None)
        self._owners.pop(key, None)

    def owner(self, path: str) -> Optional[str]:
        """Name of the contributor that wrote *path*."""
        return self._owners.get(normalize_path(path))

    def clear(self) -> None:
        self._entries.clear()
        self._owners.clear()

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            return normalize_path(path) in self._entries
        except InvalidPathError:
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def paths(self) -> list[str]:
        return sorted(self._entries)

    def entries(self) -> list[ArchiveEntry]:
        """All entries, sorted lexicographically by path."""
        return [self._entries[p] for p in sorted(self._entries)]


def materialize(entries: list[ArchiveEntry], directory: str | Path) -> list[Path]:
    """Write *entries* below *directory*, preserving the executable bit.

    Returns:
        The written file paths, in entry order.
    """
    root = Path(directory)
    written: list[Path] = []
    for entry in entries:
        target = root / entry.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(entry.content)
        if entry.executable:
            current = target.stat().st_mode
            target.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        written.append(target)
    return written


# ---------------------------------------------------------------------------
# Build model
# ---------------------------------------------------------------------------

_SCOPE_ORDER: dict[str, int] = {scope: i for i, scope in enumerate(DependencyScope.ALL)}

_GRADLE_CONFIGURATIONS: dict[str, tuple[str, ...]] = {
    DependencyScope.COMPILE: ("implementation",),
    DependencyScope.RUNTIME: ("runtimeOnly",),
    DependencyScope.COMPILE_ONLY: ("compileOnly",),
    DependencyScope.ANNOTATION_PROCESSOR: ("compileOnly", "annotationProcessor"),
    DependencyScope.PROVIDED: ("providedRuntime",),
    DependencyScope.TEST: ("testImplementation",),
}

_MAVEN_SCOPES: dict[str, Optional[str]] = {
    DependencyScope.COMPILE: None,
    DependencyScope.RUNTIME: "runtime",
    DependencyScope.COMPILE_ONLY: None,
    DependencyScope.ANNOTATION_PROCESSOR: None,
    DependencyScope.PROVIDED: "provided",
    DependencyScope.TEST: "test",
}


@dataclass
class BuildDependency:
    """A dependency as it appears in the build file."""

    group_id: str
    artifact_id: str
    version: Optional[str] = None
    scope: str = DependencyScope.COMPILE

    @property
    def coordinates(self) -> str:
        base = f"{self.group_id}:{self.artifact_id}"
        return f"{base}:{self.version}" if self.version else base

    @property
    def gradle_configurations(self) -> tuple[str, ...]:
        return _GRADLE_CONFIGURATIONS[self.scope]

    @property
    def maven_scope(self) -> Optional[str]:
        return _MAVEN_SCOPES[self.scope]

    @property
    def maven_optional(self) -> bool:
        return self.scope in (DependencyScope.COMPILE_ONLY, DependencyScope.ANNOTATION_PROCESSOR)


@dataclass
class Build:
    """Mutable build model rendered by the build-file contributor."""

    group_id: str
    artifact_id: str
    version: str
    name: str
    description: str
    packaging: str
    java_version: str
    language: Language
    platform_version: str
    properties: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, BuildDependency] = field(default_factory=dict)

    @classmethod
    def from_description(cls, description: ProjectDescription) -> "Build":
        return cls(
            group_id=description.group_id,
            artifact_id=description.artifact_id,
            version=description.version,
            name=description.name,
            description=description.description,
            packaging=description.packaging,
            java_version=description.java_version,
            language=description.language,
            platform_version=description.platform_version,
        )

    def add_dependency(self, dependency_id: str, dependency: BuildDependency) -> None:
        """Add (or replace) a dependency, keeping its first insertion position."""
        self.dependencies[dependency_id] = dependency

    def remove_dependency(self, dependency_id: str) -> None:
        self.dependencies.pop(dependency_id, None)

    def has_dependency(self, dependency_id: str) -> bool:
        return dependency_id in self.dependencies

    def has_scope(self, scope: str) -> bool:
        return any(dep.scope == scope for dep in self.dependencies.values())

    def sorted_dependencies(self) -> list[BuildDependency]:
        """Dependencies grouped by scope, insertion order within a scope."""
        indexed = list(enumerate(self.dependencies.values()))
        indexed.sort(key=lambda pair: (_SCOPE_ORDER[pair[1].scope], pair[0]))
        return [dep for _, dep in indexed]


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class GenerationContext:
    """Everything one generation request reads and writes."""

    def __init__(
        self,
        description: ProjectDescription,
        registry: ContributorRegistry,
        catalog: Optional[MetadataCatalog] = None,
        *,
        timeout: Optional[float] = None,
    ) -> None:
        self.description = description
        self.registry = registry
        self.catalog = catalog
        self.settings: BuildSettings = catalog.build if catalog is not None else BuildSettings()
        self.build = Build.from_description(description)
        self.tree = ProjectTree()
        self.current_contributor: Optional[str] = None
        self.timeout = timeout
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    # -- Files -------------------------------------------------------------

    def write_file(
        self,
        path: str,
        content: str | bytes,
        *,
        executable: bool = False,
        overwrite: bool = False,
    ) -> ArchiveEntry:
        """Add a file to the working tree on behalf of the running contributor."""
        entry = self.tree.add(
            path,
            content,
            executable=executable,
            overwrite=overwrite,
            owner=self.current_contributor,
        )
        logger.debug("%s wrote %s (%d bytes)", self.current_contributor, entry.path, len(entry.content))
        return entry

    def source_path(self, source_set: str, file_name: str) -> str:
        """Path of *file_name* inside the root package of *source_set*."""
        language_dir = self.description.language.value
        return f"src/{source_set}/{language_dir}/{self.description.package_path}/{file_name}"

    # -- Deadline ----------------------------------------------------------

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or ``None`` without one."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def check_deadline(self, next_contributor: Optional[str] = None) -> None:
        """Raise ``GenerationTimeoutError`` if the deadline has passed."""
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise GenerationTimeoutError(self.timeout or 0.0, next_contributor)

    # -- Templates ---------------------------------------------------------

    def template_context(self, **extra: Any) -> dict[str, Any]:
        """Variables made available to Jinja2 templates."""
        return {
            "description": self.description,
            "build": self.build,
            "settings": self.settings,
            "language": self.description.language.value,
            **extra,
        }
