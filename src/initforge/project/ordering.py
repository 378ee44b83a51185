"""Execution ordering of active contributors.

Contributors are sorted topologically along their ``runs_after`` relations.
Whenever several contributors are ready at the same time the tie is broken by
(capability phase, priority descending, registration order), so identical
input always yields the identical order.

Relations naming a contributor that is not part of the active set are
ignored: the referenced contributor simply does not run for this request.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Callable, Sequence

from ..errors import CyclicDependencyError
from ..registry import Contributor

logger = logging.getLogger(__name__)


def order_contributors(
    contributors: Sequence[Contributor],
    registration_index: Callable[[str], int],
) -> list[Contributor]:
    """Return *contributors* in execution order.

    Raises:
        CyclicDependencyError: If the ``runs_after`` relations among
            *contributors* contain a cycle (including a self reference).
    """
    by_name = {c.name: c for c in contributors}

    def sort_key(name: str) -> tuple[int, int, int]:
        contributor = by_name[name]
        return (contributor.capability.phase, -contributor.priority, registration_index(name))

    pending: dict[str, set[str]] = {name: set() for name in by_name}
    followers: dict[str, list[str]] = {name: [] for name in by_name}
    for contributor in contributors:
        for predecessor in contributor.runs_after:
            if predecessor not in by_name:
                logger.debug(
                    "'%s' runs after inactive contributor '%s'; relation ignored",
                    contributor.name,
                    predecessor,
                )
                continue
            pending[contributor.name].add(predecessor)
            followers[predecessor].append(contributor.name)

    ready = [(sort_key(name), name) for name, preds in pending.items() if not preds]
    heapq.heapify(ready)

    ordered: list[Contributor] = []
    while ready:
        _, name = heapq.heappop(ready)
        ordered.append(by_name[name])
        for follower in followers[name]:
            waiting = pending[follower]
            waiting.discard(name)
            if not waiting:
                heapq.heappush(ready, (sort_key(follower), follower))

    if len(ordered) != len(by_name):
        emitted = {c.name for c in ordered}
        blocked = sorted((name for name in by_name if name not in emitted), key=sort_key)
        raise CyclicDependencyError(_find_cycle(blocked, pending))
    return ordered


def _find_cycle(blocked: list[str], pending: dict[str, set[str]]) -> list[str]:
    """Walk ``runs_after`` edges among *blocked* names until one repeats.

    Every blocked contributor still waits on another blocked one, so the
    walk always closes a cycle.
    """
    path: list[str] = []
    seen: dict[str, int] = {}
    current = blocked[0]
    while current not in seen:
        seen[current] = len(path)
        path.append(current)
        current = sorted(pending[current])[0]
    return path[seen[current]:] + [current]
