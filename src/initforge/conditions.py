"""Activation conditions for contributors.

Each condition is a small immutable object whose :meth:`Condition.matches`
is a pure function of the project description and a read-only
``ConditionSnapshot``.  Conditions compose with ``&``, ``|`` and ``~``::

    OnPackaging("war") & ~OnLanguage("kotlin")
    OnDependency("web") | OnFacet("web")

Quick usage::

    from initforge.conditions import OnPackaging, evaluate

    evaluate(OnPackaging("jar"), description)   # -> True / False
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from .catalog import MetadataCatalog
from .description.models import ProjectDescription
from .description.version import InvalidVersionError, Version, VersionRange


@dataclass(frozen=True)
class ConditionSnapshot:
    """Read-only state a condition may consult besides the description."""

    catalog: Optional[MetadataCatalog] = None
    registered: frozenset[str] = field(default_factory=frozenset)


_EMPTY_SNAPSHOT = ConditionSnapshot()


class Condition(ABC):
    """Base class of all activation conditions."""

    @abstractmethod
    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        """Return ``True`` if the owning contributor should be active."""

    def __and__(self, other: "Condition") -> "Condition":
        return AllOf((self, other))

    def __or__(self, other: "Condition") -> "Condition":
        return AnyOf((self, other))

    def __invert__(self) -> "Condition":
        return Not(self)


def evaluate(
    condition: Condition,
    description: ProjectDescription,
    snapshot: ConditionSnapshot | None = None,
) -> bool:
    """Evaluate *condition* against *description*."""
    return bool(condition.matches(description, snapshot or _EMPTY_SNAPSHOT))


# ---------------------------------------------------------------------------
# Leaf conditions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Always(Condition):
    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return True

    def __str__(self) -> str:
        return "always"


ALWAYS = Always()


@dataclass(frozen=True)
class OnPackaging(Condition):
    """Active when the requested packaging equals ``packaging``."""

    packaging: str

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return description.packaging == self.packaging.lower()

    def __str__(self) -> str:
        return f"packaging=={self.packaging}"


@dataclass(frozen=True)
class OnBuildSystem(Condition):
    """Active for a build system, optionally restricted to one dialect."""

    build_system: str
    dialect: Optional[str] = None

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        if description.build_system.value != self.build_system.lower():
            return False
        if self.dialect is None:
            return True
        return description.build_dialect.value == self.dialect.lower()

    def __str__(self) -> str:
        if self.dialect:
            return f"build=={self.build_system}/{self.dialect}"
        return f"build=={self.build_system}"


@dataclass(frozen=True)
class OnLanguage(Condition):
    language: str

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return description.language.value == self.language.lower()

    def __str__(self) -> str:
        return f"language=={self.language}"


@dataclass(frozen=True)
class OnPlatformVersion(Condition):
    """Active when the platform version falls in ``version_range``.

    An unparsable platform version never matches.
    """

    version_range: VersionRange

    @classmethod
    def of(cls, expression: str) -> "OnPlatformVersion":
        """Build from a range expression such as ``"[3.0.0,3.2.0)"``."""
        return cls(VersionRange.parse(expression))

    @classmethod
    def between(cls, minimum: str | None = None, maximum: str | None = None) -> "OnPlatformVersion":
        """Active for ``minimum <= version < maximum``."""
        return cls(VersionRange.between(minimum, maximum))

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        try:
            version = Version.parse(description.platform_version)
        except InvalidVersionError:
            return False
        return self.version_range.match(version)

    def __str__(self) -> str:
        return f"platform in {self.version_range}"


@dataclass(frozen=True)
class OnDependency(Condition):
    """Active when ``dependency_id`` was requested."""

    dependency_id: str

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return description.has_dependency(self.dependency_id)

    def __str__(self) -> str:
        return f"dependency({self.dependency_id})"


@dataclass(frozen=True)
class OnFacet(Condition):
    """Active when a requested dependency carries ``facet`` in the catalog."""

    facet: str

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        if snapshot.catalog is None:
            return False
        return snapshot.catalog.has_facet(description.dependencies, self.facet)

    def __str__(self) -> str:
        return f"facet({self.facet})"


@dataclass(frozen=True)
class OnContributor(Condition):
    """Active when a contributor named ``name`` is registered."""

    name: str

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return self.name in snapshot.registered

    def __str__(self) -> str:
        return f"registered({self.name})"


@dataclass(frozen=True)
class Predicate(Condition):
    """Wraps a custom pure function ``(description, snapshot) -> bool``."""

    function: Callable[[ProjectDescription, ConditionSnapshot], bool] = field(compare=False)
    label: str = "custom"

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return bool(self.function(description, snapshot))

    def __str__(self) -> str:
        return self.label


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AllOf(Condition):
    conditions: tuple[Condition, ...]

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return all(c.matches(description, snapshot) for c in self.conditions)

    def __and__(self, other: Condition) -> Condition:
        return AllOf(self.conditions + (other,))

    def __str__(self) -> str:
        return "(" + " & ".join(str(c) for c in self.conditions) + ")"


@dataclass(frozen=True)
class AnyOf(Condition):
    conditions: tuple[Condition, ...]

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return any(c.matches(description, snapshot) for c in self.conditions)

    def __or__(self, other: Condition) -> Condition:
        return AnyOf(self.conditions + (other,))

    def __str__(self) -> str:
        return "(" + " | ".join(str(c) for c in self.conditions) + ")"


@dataclass(frozen=True)
class Not(Condition):
    condition: Condition

    def matches(self, description: ProjectDescription, snapshot: ConditionSnapshot) -> bool:
        return not self.condition.matches(description, snapshot)

    def __invert__(self) -> Condition:
        return self.condition

    def __str__(self) -> str:
        return f"!{self.condition}"
