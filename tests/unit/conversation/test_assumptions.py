"""Unit tests for the assumption dependency graph."""

from datetime import datetime, timedelta, timezone

import pytest

from scout.conversation.assumptions import AssumptionGraph
from scout.conversation.models import Assumption, AssumptionCategory, AssumptionStatus
from scout.errors import AssumptionCycleError, InvalidInputError

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


def assumption(
    assumption_id: str,
    *depends_on: str,
    order: int = 0,
    status: AssumptionStatus = AssumptionStatus.PROPOSED,
) -> Assumption:
    created = T0 + timedelta(seconds=order)
    return Assumption(
        id=assumption_id,
        category=AssumptionCategory.TECHNICAL_REQUIREMENTS,
        statement=f"Assume {assumption_id}",
        depends_on=set(depends_on),
        status=status,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def chain() -> AssumptionGraph:
    """users <- auth <- billing, plus an unrelated hosting assumption."""
    graph = AssumptionGraph(now=T0 + timedelta(hours=1))
    graph.attach(
        [
            assumption("users", order=0),
            assumption("auth", "users", order=1),
            assumption("billing", "auth", order=2),
            assumption("hosting", order=3),
        ]
    )
    return graph


class TestAttach:
    """Tests for attaching assumptions."""

    def test_returns_ids_in_given_order(self) -> None:
        graph = AssumptionGraph()

        attached = graph.attach([assumption("b", "a", order=1), assumption("a", order=0)])

        assert attached == ["b", "a"]
        assert graph.topological_order() == ["a", "b"]

    def test_depends_on_existing_assumption(self, chain: AssumptionGraph) -> None:
        chain.attach([assumption("reports", "billing", "hosting", order=4)])

        order = chain.topological_order()
        assert order.index("reports") > order.index("billing")
        assert order.index("reports") > order.index("hosting")

    def test_cycle_within_batch_rejected(self) -> None:
        """A batch whose members depend on each other is refused whole."""
        graph = AssumptionGraph()

        with pytest.raises(AssumptionCycleError, match="cycle"):
            graph.attach([assumption("a", "b"), assumption("b", "a")])

        assert graph.assumptions == {}

    def test_self_dependency_rejected(self) -> None:
        graph = AssumptionGraph()

        with pytest.raises(AssumptionCycleError, match="itself"):
            graph.attach([assumption("a", "a")])

    def test_dangling_dependency_rejected(self, chain: AssumptionGraph) -> None:
        before = chain.assumptions

        with pytest.raises(AssumptionCycleError, match="unknown"):
            chain.attach([assumption("ok", order=5), assumption("bad", "missing", order=6)])

        assert chain.assumptions == before

    def test_duplicate_id_rejected(self, chain: AssumptionGraph) -> None:
        with pytest.raises(InvalidInputError, match="Duplicate"):
            chain.attach([assumption("users")])

    def test_empty_batch_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            AssumptionGraph().attach([])

    def test_dependent_of_rejected_starts_pending(self, chain: AssumptionGraph) -> None:
        """New assumptions built on a rejected one need re-evaluation."""
        chain.reject("hosting")

        chain.attach([assumption("cdn", "hosting", order=7)])

        assert chain.get("cdn").status is AssumptionStatus.PENDING_REEVALUATION

    def test_input_mapping_not_mutated(self) -> None:
        original = {"a": assumption("a")}
        graph = AssumptionGraph(original)

        graph.accept("a")

        assert original["a"].status is AssumptionStatus.PROPOSED


class TestAcceptReject:
    """Tests for status changes and cascades."""

    def test_accept_requires_accepted_dependencies(self, chain: AssumptionGraph) -> None:
        with pytest.raises(InvalidInputError, match="unaccepted"):
            chain.accept("auth")

        chain.accept("users")
        accepted = chain.accept("auth")

        assert accepted.status is AssumptionStatus.ACCEPTED
        assert accepted.user_accepted is True
        assert accepted.updated_at == T0 + timedelta(hours=1)

    def test_reject_cascades_to_transitive_dependents(self, chain: AssumptionGraph) -> None:
        """Nothing downstream of a rejection stays accepted."""
        for key in ("users", "auth", "billing", "hosting"):
            chain.accept(key)

        invalidated = chain.reject("users")

        assert invalidated == ["auth", "billing"]
        assert chain.get("users").user_accepted is False
        assert chain.get("auth").status is AssumptionStatus.PENDING_REEVALUATION
        assert chain.get("billing").status is AssumptionStatus.PENDING_REEVALUATION
        assert chain.get("hosting").status is AssumptionStatus.ACCEPTED

    def test_reject_skips_already_rejected(self, chain: AssumptionGraph) -> None:
        chain.reject("auth")

        invalidated = chain.reject("users")

        assert invalidated == ["billing"]
        assert chain.get("auth").status is AssumptionStatus.REJECTED

    def test_pending_dependent_cannot_be_accepted(self, chain: AssumptionGraph) -> None:
        chain.accept("users")
        chain.reject("users")

        with pytest.raises(InvalidInputError):
            chain.accept("auth")

    def test_diamond_dependent_reported_once(self) -> None:
        graph = AssumptionGraph()
        graph.attach(
            [
                assumption("root", order=0),
                assumption("left", "root", order=1),
                assumption("right", "root", order=2),
                assumption("leaf", "left", "right", order=3),
            ]
        )

        assert graph.dependents("root") == ["left", "right", "leaf"]

    def test_unknown_id(self, chain: AssumptionGraph) -> None:
        with pytest.raises(InvalidInputError, match="Unknown"):
            chain.reject("nope")
