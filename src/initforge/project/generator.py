"""Generation orchestrator.

``ProjectGenerator`` is the long-lived facade a hosting application creates
once.  Every call to :meth:`ProjectGenerator.generate` builds a fresh
``ProjectGeneration`` which walks a linear state machine::

    CREATED -> DESCRIPTION_BOUND -> CONTRIBUTORS_REGISTERED -> RESOLVED
            -> RENDERED -> PACKAGED -> DONE

Any failure moves the run to ``FAILED`` and discards the working tree.  A run
cannot be resumed or repeated.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TypeVar

from ..archive import Packager, resolve_format
from ..catalog import MetadataCatalog
from ..config import GeneratorConfig
from ..contributors import default_contributors
from ..description.builder import build_description, validate_description
from ..description.models import ProjectDescription
from ..errors import (
    ContributorExecutionError,
    GenerationStateError,
    InvalidDescriptionError,
    InvalidPathError,
)
from ..registry import Contributor, ContributorRegistry
from ..templates import TemplateRenderer
from ..utils import format_duration, normalize_path
from .context import ArchiveEntry, GenerationContext, materialize
from .ordering import order_contributors

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class GenerationState(str, Enum):
    CREATED = "created"
    DESCRIPTION_BOUND = "description-bound"
    CONTRIBUTORS_REGISTERED = "contributors-registered"
    RESOLVED = "resolved"
    RENDERED = "rendered"
    PACKAGED = "packaged"
    DONE = "done"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass
class GenerationResult:
    """Outcome of one generation request.

    ``entries`` is always populated.  ``archive`` holds the packaged bytes
    when an archive format was requested, together with its
    ``content_type``; ``filename`` is the archive file name, or the project
    directory name otherwise.
    """

    entries: list[ArchiveEntry]
    root: str
    archive: Optional[bytes] = None
    content_type: Optional[str] = None
    filename: str = ""
    activated: list[str] = field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]

    def get(self, path: str) -> Optional[ArchiveEntry]:
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None

    def write_to(self, directory: str | Path) -> Path:
        """Materialise the project below *directory*/<root>.

        Returns:
            Path to the written project root.

        Raises:
            InvalidPathError: If the root resolves outside *directory*.
        """
        target = Path(directory).resolve()
        project_root = (target / self.root).resolve()
        if project_root == target or target not in project_root.parents:
            raise InvalidPathError(self.root)
        project_root.mkdir(parents=True, exist_ok=True)
        materialize(self.entries, project_root)
        return project_root


# ---------------------------------------------------------------------------
# Per-request run
# ---------------------------------------------------------------------------


class ProjectGeneration:
    """A single, non-reusable generation run."""

    def __init__(
        self,
        description: ProjectDescription,
        *,
        renderer: TemplateRenderer,
        catalog: Optional[MetadataCatalog] = None,
        extensions: Iterable[Contributor] = (),
        timeout: Optional[float] = None,
        archive_format: Optional[str] = None,
        packager: Optional[Packager] = None,
    ) -> None:
        self.description = description
        self.renderer = renderer
        self.catalog = catalog
        self.extensions = list(extensions)
        self.timeout = timeout
        self.archive_format = archive_format
        self.packager = packager or Packager()
        self.state = GenerationState.CREATED
        self.registry: Optional[ContributorRegistry] = None
        self.context: Optional[GenerationContext] = None
        self.plan: list[Contributor] = []

    def run(self) -> GenerationResult:
        """Execute every step of the generation.

        Raises:
            GenerationStateError: If this run already started.
            GenerationError: Any failure of the run itself; the working
                tree is discarded and the state becomes ``FAILED``.
        """
        if self.state is not GenerationState.CREATED:
            raise GenerationStateError(
                f"Generation of '{self.description.artifact_id}' cannot run from state '{self.state.value}'"
            )

        start = time.monotonic()
        try:
            self._bind()
            self._register()
            self._resolve()
            self._render()
            result = self._package()
        except Exception:
            self.state = GenerationState.FAILED
            if self.context is not None:
                self.context.tree.clear()
            logger.warning(
                "Generation of '%s' failed after %s",
                self.description.artifact_id,
                format_duration(time.monotonic() - start),
            )
            raise

        self.state = GenerationState.DONE
        logger.info(
            "Generated '%s' (%d files, %d contributors) in %s",
            self.description.artifact_id,
            len(result.entries),
            len(self.plan),
            format_duration(time.monotonic() - start),
        )
        return result

    # -- Steps -------------------------------------------------------------

    def _require(self, value: Optional[_T], what: str) -> _T:
        if value is None:
            raise GenerationStateError(
                f"Generation of '{self.description.artifact_id}' has no {what} in state '{self.state.value}'"
            )
        return value

    def _bind(self) -> None:
        violations = validate_description(self.description, self.catalog)
        if violations:
            raise InvalidDescriptionError(violations)
        self.state = GenerationState.DESCRIPTION_BOUND

    def _register(self) -> None:
        self.registry = ContributorRegistry(self.description, self.catalog)
        self.registry.register_all(default_contributors(self.renderer))
        self.registry.register_all(self.extensions)
        self.context = GenerationContext(
            self.description, self.registry, self.catalog, timeout=self.timeout
        )
        self.state = GenerationState.CONTRIBUTORS_REGISTERED

    def _resolve(self) -> None:
        registry = self._require(self.registry, "registry")
        active = registry.resolve_all()
        self.plan = order_contributors(active, registry.registration_index)
        logger.debug("Execution plan: %s", ", ".join(c.name for c in self.plan))
        self.state = GenerationState.RESOLVED

    def _render(self) -> None:
        context = self._require(self.context, "context")
        for contributor in self.plan:
            context.check_deadline(contributor.name)
            context.current_contributor = contributor.name
            try:
                contributor.contribute(context)
            except Exception as exc:
                raise ContributorExecutionError(contributor.name, exc) from exc
            finally:
                context.current_contributor = None
        context.check_deadline()
        self.state = GenerationState.RENDERED

    def _package(self) -> GenerationResult:
        entries = self._require(self.context, "context").tree.entries()
        base_directory = self.description.base_directory
        root = normalize_path(base_directory) if base_directory else self.description.artifact_id
        result = GenerationResult(
            entries=entries,
            root=root,
            filename=root,
            activated=[c.name for c in self.plan],
        )
        if self.archive_format is not None:
            archive_format = resolve_format(self.archive_format)
            result.archive = self.packager.package(entries, archive_format, root=root)
            result.content_type = archive_format.content_type
            result.filename = f"{root}.{archive_format.extension}"
        self.state = GenerationState.PACKAGED
        return result


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Reusable entry point of the generation engine.

    Holds only read-only collaborators (configuration, catalog, renderer,
    extension contributors), so one instance may serve concurrent requests.

    Quick usage::

        generator = ProjectGenerator()
        description = build_description({"type": "gradle-project", "dependencies": "web"})
        result = generator.generate(description, archive_format="zip")
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        catalog: Optional[MetadataCatalog] = None,
        renderer: Optional[TemplateRenderer] = None,
        extensions: Iterable[Contributor] = (),
    ) -> None:
        self.config = config or GeneratorConfig()
        if catalog is None:
            catalog = (
                MetadataCatalog.from_yaml(self.config.catalog_path)
                if self.config.catalog_path is not None
                else MetadataCatalog.default()
            )
        self.catalog = catalog
        self.renderer = renderer or TemplateRenderer(self.config.template_dir)
        self.extensions = tuple(extensions)
        self.packager = Packager()

    # -- Public API --------------------------------------------------------

    def generate(
        self,
        description: ProjectDescription,
        archive_format: Optional[str] = None,
    ) -> GenerationResult:
        """Generate the project for *description*.

        Args:
            description: The validated-on-bind project description.
            archive_format: ``zip``, ``tgz`` (or an alias).  When omitted the
                result carries the sorted entries only.

        Raises:
            GenerationError: See :mod:`initforge.errors`.
        """
        if archive_format is not None:
            # Fail before doing any work.
            resolve_format(archive_format)
        generation = ProjectGeneration(
            description,
            renderer=self.renderer,
            catalog=self.catalog,
            extensions=self.extensions,
            timeout=self.config.generation_timeout,
            archive_format=archive_format,
            packager=self.packager,
        )
        return generation.run()

    def generate_from_request(
        self,
        raw_request: Mapping[str, Any],
        archive_format: Optional[str] = None,
    ) -> GenerationResult:
        """Build a description from request parameters and package it.

        Falls back to ``config.archive_format`` when *archive_format* is not
        given, since request-driven callers always expect an archive.
        """
        description = build_description(raw_request, self.config)
        return self.generate(description, archive_format or self.config.archive_format)

    def validate(self, description: ProjectDescription) -> list[str]:
        """Dry-run validation: every violation found, without generating."""
        return validate_description(description, self.catalog)
