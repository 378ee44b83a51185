"""Per-request generation state and ordering.

The orchestrator lives in :mod:`initforge.project.generator`; it is not
imported here because it depends on the archive and contributor modules,
which themselves build on :mod:`initforge.project.context`.
"""

from .context import ArchiveEntry, Build, BuildDependency, GenerationContext, ProjectTree
from .ordering import order_contributors

__all__ = [
    "ArchiveEntry",
    "Build",
    "BuildDependency",
    "GenerationContext",
    "ProjectTree",
    "order_contributors",
]
