"""Per-request contributor registry.

A ``ContributorRegistry`` is created for exactly one generation request.  It
collects candidate contributors, each carrying its own activation condition,
and resolves which of them are active for the request's description.

Resolution is memoised per capability.  Because a memoised answer would go
stale if a contributor were added afterwards, the registry closes itself on
the first resolution and rejects further registrations.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .catalog import MetadataCatalog
from .conditions import ALWAYS, Condition, ConditionSnapshot
from .description.models import ProjectDescription
from .errors import (
    AmbiguousResolutionError,
    ContributorExecutionError,
    DuplicateRegistrationError,
    RegistryClosedError,
)

if TYPE_CHECKING:
    from .project.context import GenerationContext

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """Category of contribution, used to group resolution.

    Declaration order is also the default render phase order: the build
    model is customised before the build file that renders it is written.
    """

    BUILD_CUSTOMIZER = "customizes-build"
    PACKAGING = "packaging"
    SOURCE_FILE = "source-file"
    RESOURCE_FILE = "resource-file"
    BUILD_FILE = "build-file"
    POST_PROCESS = "post-process"

    @property
    def phase(self) -> int:
        return list(Capability).index(self)


# Capabilities where two simultaneously active contributors are a configuration error.
SINGLE_CAPABILITIES: frozenset[Capability] = frozenset({Capability.PACKAGING, Capability.BUILD_FILE})


# ---------------------------------------------------------------------------
# Contributors
# ---------------------------------------------------------------------------


class Contributor(ABC):
    """A named unit of work gated by an activation condition.

    Subclasses set the class attributes and implement :meth:`contribute`.
    Instances must not keep per-request state: the same instance may serve
    many generation requests.
    """

    name: str = ""
    capability: Capability = Capability.POST_PROCESS
    condition: Condition = ALWAYS
    priority: int = 0
    runs_after: tuple[str, ...] = ()

    @abstractmethod
    def contribute(self, context: "GenerationContext") -> None:
        """Add to or modify the project held by *context*."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} {self.capability.value} when {self.condition}>"


class FunctionContributor(Contributor):
    """Adapts a plain callable ``fn(context)`` into a contributor."""

    def __init__(
        self,
        name: str,
        capability: Capability,
        function: Callable[["GenerationContext"], None],
        *,
        condition: Condition = ALWAYS,
        priority: int = 0,
        runs_after: Iterable[str] = (),
    ) -> None:
        self.name = name
        self.capability = capability
        self.function = function
        self.condition = condition
        self.priority = priority
        self.runs_after = tuple(runs_after)

    def contribute(self, context: "GenerationContext") -> None:
        self.function(context)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ContributorRegistry:
    """Candidate contributors of one request and their resolution."""

    def __init__(
        self,
        description: ProjectDescription,
        catalog: Optional[MetadataCatalog] = None,
    ) -> None:
        self.description = description
        self.catalog = catalog
        self._contributors: list[Contributor] = []
        self._index: dict[str, int] = {}
        self._cache: dict[Capability, tuple[Contributor, ...]] = {}
        self._active: dict[str, bool] = {}
        self._snapshot: Optional[ConditionSnapshot] = None

    # -- Registration ------------------------------------------------------

    def register(self, contributor: Contributor) -> None:
        """Add one candidate contributor.

        Raises:
            DuplicateRegistrationError: If the name is already registered.
            RegistryClosedError: If resolution has already started.
        """
        name = contributor.name
        if not name:
            raise ValueError(f"Contributor {contributor!r} has no name")
        if self.closed:
            raise RegistryClosedError(name)
        if name in self._index:
            raise DuplicateRegistrationError(name)
        self._index[name] = len(self._contributors)
        self._contributors.append(contributor)

    def register_all(self, contributors: Iterable[Contributor]) -> None:
        for contributor in contributors:
            self.register(contributor)

    @property
    def closed(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> ConditionSnapshot:
        """The condition snapshot; taking it closes the registry."""
        if self._snapshot is None:
            self._snapshot = ConditionSnapshot(
                catalog=self.catalog,
                registered=frozenset(self._index),
            )
        return self._snapshot

    # -- Lookup ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._contributors)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[Contributor]:
        return iter(self._contributors)

    def get(self, name: str) -> Optional[Contributor]:
        index = self._index.get(name)
        return None if index is None else self._contributors[index]

    def registration_index(self, name: str) -> int:
        return self._index[name]

    # -- Resolution --------------------------------------------------------

    def is_active(self, contributor: Contributor) -> bool:
        """Evaluate (once) whether *contributor* is active for this request."""
        cached = self._active.get(contributor.name)
        if cached is not None:
            return cached
        try:
            active = bool(contributor.condition.matches(self.description, self.snapshot))
        except Exception as exc:
            raise ContributorExecutionError(contributor.name, exc) from exc
        logger.debug(
            "%s '%s' (%s): %s",
            "Activated" if active else "Skipped",
            contributor.name,
            contributor.condition,
            contributor.capability.value,
        )
        self._active[contributor.name] = active
        return active

    def resolve(self, capability: Capability) -> tuple[Contributor, ...]:
        """Return the active contributors of *capability*.

        Ordered by priority (highest first), then registration order.  An
        empty tuple is a valid answer.
        """
        cached = self._cache.get(capability)
        if cached is not None:
            return cached
        candidates = [
            c for c in self._contributors
            if c.capability is capability and self.is_active(c)
        ]
        candidates.sort(key=lambda c: (-c.priority, self._index[c.name]))
        resolved = tuple(candidates)
        self._cache[capability] = resolved
        return resolved

    def resolve_single(self, capability: Capability) -> Optional[Contributor]:
        """Return the single active contributor of *capability*, or ``None``.

        Raises:
            AmbiguousResolutionError: If more than one contributor is active.
        """
        resolved = self.resolve(capability)
        if len(resolved) > 1:
            raise AmbiguousResolutionError(capability.value, [c.name for c in resolved])
        return resolved[0] if resolved else None

    def resolve_all(self) -> tuple[Contributor, ...]:
        """Active contributors of every capability, grouped in phase order.

        Single-valued capabilities are checked for ambiguity.
        """
        active: list[Contributor] = []
        for capability in Capability:
            if capability in SINGLE_CAPABILITIES:
                single = self.resolve_single(capability)
                if single is not None:
                    active.append(single)
            else:
                active.extend(self.resolve(capability))
        return tuple(active)
