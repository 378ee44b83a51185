"""Error taxonomy for the generation engine.

Every error raised by the engine derives from ``GenerationError`` and carries
a stable ``kind`` string plus an optional ``contributor`` identity so that a
request layer can translate failures into client-facing responses without
parsing messages.
"""

from __future__ import annotations

from collections.abc import Sequence


class GenerationError(Exception):
    """Base class for all generation failures."""

    kind: str = "generation-error"

    def __init__(self, message: str, contributor: str | None = None) -> None:
        self.message = message
        self.contributor = contributor
        super().__init__(message)


# ---------------------------------------------------------------------------
# Caller input
# ---------------------------------------------------------------------------


class InvalidDescriptionError(GenerationError):
    """Raised when a project description fails validation."""

    kind = "invalid-description"

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations = list(violations)
        super().__init__("Invalid project description: " + "; ".join(self.violations))


class UnsupportedFormatError(GenerationError):
    """Raised when an archive format identifier is not recognised."""

    kind = "unsupported-format"

    def __init__(self, fmt: str, supported: Sequence[str] = ()) -> None:
        self.format = fmt
        message = f"Unsupported archive format: {fmt!r}"
        if supported:
            message += f" (supported: {', '.join(supported)})"
        super().__init__(message)


class DuplicateEntryError(GenerationError):
    """Raised when two entries share the same normalised path.

    A file whose path is also the parent directory of another entry counts
    as the same path.
    """

    kind = "duplicate-entry"

    def __init__(self, path: str, contributor: str | None = None) -> None:
        self.path = path
        super().__init__(f"Duplicate entry for path '{path}'", contributor)


class InvalidPathError(GenerationError):
    """Raised when an entry path escapes the project root or is empty."""

    kind = "invalid-path"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Invalid entry path: {path!r}")


# ---------------------------------------------------------------------------
# Contributor configuration
# ---------------------------------------------------------------------------


class DuplicateRegistrationError(GenerationError):
    """Raised when the same contributor identity is registered twice."""

    kind = "duplicate-registration"

    def __init__(self, name: str) -> None:
        super().__init__(f"Contributor '{name}' is already registered", name)


class RegistryClosedError(GenerationError):
    """Raised when registering after the registry has started resolving."""

    kind = "registry-closed"

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Cannot register '{name}': the registry has already been resolved", name
        )


class AmbiguousResolutionError(GenerationError):
    """Raised when more than one contributor is active for a single-valued capability."""

    kind = "ambiguous-resolution"

    def __init__(self, capability: str, names: Sequence[str]) -> None:
        self.capability = capability
        self.candidates = list(names)
        super().__init__(
            f"Expected at most one active '{capability}' contributor, "
            f"found {len(self.candidates)}: {', '.join(self.candidates)}"
        )


class CyclicDependencyError(GenerationError):
    """Raised when ``runs_after`` relations form a cycle."""

    kind = "cyclic-dependency"

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(
            "Cyclic runs-after relation: " + " -> ".join(self.cycle),
            self.cycle[0] if self.cycle else None,
        )


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


class ContributorExecutionError(GenerationError):
    """Wraps the failure of a single contributor."""

    kind = "contributor-failed"

    def __init__(self, contributor: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(
            f"Contributor '{contributor}' failed: {type(cause).__name__}: {cause}",
            contributor,
        )


class GenerationTimeoutError(GenerationError):
    """Raised when the per-request deadline expires between two contributors."""

    kind = "deadline-exceeded"

    def __init__(self, timeout: float, next_contributor: str | None = None) -> None:
        self.timeout = timeout
        super().__init__(
            f"Generation exceeded its {timeout:.1f}s deadline", next_contributor
        )


class GenerationStateError(GenerationError):
    """Raised when a generation run is re-entered or resumed."""

    kind = "illegal-state"
