"""Dependency bookkeeping for a session's assumptions.

Assumptions and their ``depends_on`` edges form a DAG. Rejecting an
assumption sends every transitive dependent back to pending
re-evaluation; nothing downstream of a rejection stays accepted.
"""

from collections import deque
from collections.abc import Iterable, Mapping
from datetime import datetime

from scout.conversation.models import Assumption, AssumptionStatus
from scout.errors import AssumptionCycleError, InvalidInputError
from scout.profile.models import utc_now

_INVALIDATING = (AssumptionStatus.REJECTED, AssumptionStatus.PENDING_REEVALUATION)


class AssumptionGraph:
    """Works on a private copy of a session's assumptions.

    Every operation validates before it changes anything, so a failed
    call leaves the graph as it was.
    """

    def __init__(
        self,
        assumptions: Mapping[str, Assumption] | None = None,
        now: datetime | None = None,
    ) -> None:
        self._nodes: dict[str, Assumption] = {
            key: value.model_copy(deep=True) for key, value in (assumptions or {}).items()
        }
        self._now = now or utc_now()

    @property
    def assumptions(self) -> dict[str, Assumption]:
        return {key: value.model_copy(deep=True) for key, value in self._nodes.items()}

    def get(self, assumption_id: str) -> Assumption:
        node = self._nodes.get(assumption_id)
        if node is None:
            raise InvalidInputError(f"Unknown assumption: {assumption_id}")
        return node

    def attach(self, new: Iterable[Assumption]) -> list[str]:
        """Add assumptions, all or nothing.

        Raises:
            InvalidInputError: On a duplicate id
            AssumptionCycleError: On a dangling dependency or a cycle
        """
        incoming = [a.model_copy(deep=True) for a in new]
        if not incoming:
            raise InvalidInputError("no assumptions to attach")

        candidate = dict(self._nodes)
        for assumption in incoming:
            if assumption.id in candidate:
                raise InvalidInputError(f"Duplicate assumption id: {assumption.id}")
            candidate[assumption.id] = assumption

        for assumption in incoming:
            missing = assumption.depends_on - candidate.keys()
            if missing:
                raise AssumptionCycleError(
                    f"Assumption {assumption.id} depends on unknown {sorted(missing)}"
                )
            if assumption.id in assumption.depends_on:
                raise AssumptionCycleError(f"Assumption {assumption.id} depends on itself")

        # Raises on a cycle before anything is committed
        _topological_order(candidate)

        for assumption in incoming:
            if any(candidate[dep].status in _INVALIDATING for dep in assumption.depends_on):
                assumption.status = AssumptionStatus.PENDING_REEVALUATION
                assumption.updated_at = self._now

        self._nodes = candidate
        return [a.id for a in incoming]

    def accept(self, assumption_id: str) -> Assumption:
        """Accept an assumption whose dependencies are all accepted."""
        node = self.get(assumption_id)
        blocked = sorted(
            dep
            for dep in node.depends_on
            if self._nodes[dep].status is not AssumptionStatus.ACCEPTED
        )
        if blocked:
            raise InvalidInputError(
                f"Assumption {assumption_id} depends on unaccepted assumptions {blocked}"
            )
        node.status = AssumptionStatus.ACCEPTED
        node.updated_at = self._now
        return node.model_copy(deep=True)

    def reject(self, assumption_id: str) -> list[str]:
        """Reject an assumption; returns the dependents sent back for re-evaluation."""
        node = self.get(assumption_id)
        node.status = AssumptionStatus.REJECTED
        node.updated_at = self._now

        invalidated: list[str] = []
        for dependent_id in self.dependents(assumption_id):
            dependent = self._nodes[dependent_id]
            if dependent.status is AssumptionStatus.REJECTED:
                continue
            dependent.status = AssumptionStatus.PENDING_REEVALUATION
            dependent.updated_at = self._now
            invalidated.append(dependent_id)
        return invalidated

    def dependents(self, assumption_id: str) -> list[str]:
        """Transitive dependents in breadth-first order."""
        self.get(assumption_id)
        children: dict[str, list[str]] = {key: [] for key in self._nodes}
        for key in self.topological_order():
            for dep in self._nodes[key].depends_on:
                children[dep].append(key)

        seen: list[str] = []
        queue = deque(children[assumption_id])
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.append(current)
            queue.extend(children[current])
        return seen

    def topological_order(self) -> list[str]:
        """Ids ordered so that every assumption follows its dependencies."""
        return _topological_order(self._nodes)


def _topological_order(nodes: Mapping[str, Assumption]) -> list[str]:
    remaining = {key: set(node.depends_on) for key, node in nodes.items()}
    order: list[str] = []
    while remaining:
        ready = sorted(
            (key for key, deps in remaining.items() if not deps),
            key=lambda key: (nodes[key].created_at, key),
        )
        if not ready:
            raise AssumptionCycleError(
                f"Assumption dependencies form a cycle among {sorted(remaining)}"
            )
        for key in ready:
            order.append(key)
            del remaining[key]
        for deps in remaining.values():
            deps.difference_update(ready)
    return order
