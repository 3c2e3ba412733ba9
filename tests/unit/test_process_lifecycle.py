"""Unit tests for ProcessLifecycle against an in-memory unit of work."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from src.domain import ActorSnapshot, AssessmentProcessStatus, StatusHistoryEntry, User
from src.domain.services.process_lifecycle import (
    InvalidTransitionError,
    PersistenceFailureError,
    ProcessLifecycle,
    ProcessNotFoundError,
    StaleStateError,
    UnauthorizedTransitionError,
)

from tests.fakes import InMemoryStore, InMemoryUnitOfWork

S = AssessmentProcessStatus
CREATED_AT = datetime(2025, 1, 1, 9, 0, tzinfo=UTC)
HR = ActorSnapshot(id="hr-1", name="HR Admin")


def store_with(status: S = S.IN_DEFINITION, process_id: str = "P1") -> InMemoryStore:
    """Build a store whose P1 history walks from in_definition up to ``status``."""
    store = InMemoryStore()
    entries = []
    for offset, stage in enumerate(S):
        entries.append(
            StatusHistoryEntry(
                status=stage, changed_at=CREATED_AT + timedelta(days=offset), changed_by=HR
            )
        )
        if stage is status:
            break
    store.add_process(process_id, *entries)
    return store


def fixed_clock(moment: datetime):
    return lambda: moment


class TestSuccessfulTransition:
    @pytest.mark.asyncio
    async def test_manager_moves_process_into_self_assessment(self, manager: User) -> None:
        store = store_with(S.IN_DEFINITION)
        uow = InMemoryUnitOfWork(store)
        now = datetime(2025, 2, 1, tzinfo=UTC)

        result = await ProcessLifecycle(uow, clock=fixed_clock(now)).transition(
            "P1", S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, manager
        )

        assert result.status is S.IN_SELF_ASSESSMENT
        assert result.previous_status is S.IN_DEFINITION
        assert result.changed_at == now
        assert result.history_entry.changed_by == ActorSnapshot(
            id="manager-1", name="Maria Manager"
        )
        assert store.statuses["P1"] is S.IN_SELF_ASSESSMENT
        assert [entry.status for entry in store.history["P1"]] == [
            S.IN_DEFINITION,
            S.IN_SELF_ASSESSMENT,
        ]
        assert uow.commits == 1
        assert uow.rollbacks == 0

    @pytest.mark.asyncio
    async def test_full_progression_keeps_history_in_step_with_status(
        self, manager: User
    ) -> None:
        store = store_with(S.IN_DEFINITION)
        moment = datetime(2025, 2, 1, tzinfo=UTC)

        current = S.IN_DEFINITION
        while current.successor is not None:
            moment += timedelta(hours=1)
            lifecycle = ProcessLifecycle(InMemoryUnitOfWork(store), clock=fixed_clock(moment))
            result = await lifecycle.transition("P1", current, current.successor, manager)
            current = result.status

            assert store.history["P1"][-1].status is store.statuses["P1"]

        assert current is S.COMPLETED
        assert len(store.history["P1"]) == 4
        stamps = [entry.changed_at for entry in store.history["P1"]]
        assert stamps == sorted(stamps)

    @pytest.mark.asyncio
    async def test_history_timestamp_never_goes_backwards(self, manager: User) -> None:
        store = store_with(S.IN_DEFINITION)
        latest = store.history["P1"][-1].changed_at
        skewed_clock = fixed_clock(latest - timedelta(minutes=5))

        result = await ProcessLifecycle(InMemoryUnitOfWork(store), clock=skewed_clock).transition(
            "P1", S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, manager
        )

        assert result.changed_at == latest

    @pytest.mark.asyncio
    async def test_actor_snapshot_falls_back_to_email_then_id(self) -> None:
        store = store_with(S.IN_DEFINITION)
        anonymous = User(user_id="admin-7", email="", name="", roles=["admin"])

        result = await ProcessLifecycle(InMemoryUnitOfWork(store)).transition(
            "P1", S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, anonymous
        )

        assert result.history_entry.changed_by == ActorSnapshot(id="admin-7", name="admin-7")


class TestRejectedTransitions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("current", "requested"),
        [
            (S.IN_DEFINITION, S.AWAITING_MANAGER_ASSESSMENT),
            (S.IN_DEFINITION, S.COMPLETED),
            (S.IN_SELF_ASSESSMENT, S.IN_DEFINITION),
            (S.AWAITING_MANAGER_ASSESSMENT, S.AWAITING_MANAGER_ASSESSMENT),
            (S.COMPLETED, S.IN_DEFINITION),
            (S.COMPLETED, S.COMPLETED),
        ],
    )
    async def test_non_successor_targets_are_invalid(
        self, manager: User, current: S, requested: S
    ) -> None:
        store = store_with(current)
        history_before = list(store.history["P1"])
        uow = InMemoryUnitOfWork(store)

        with pytest.raises(InvalidTransitionError):
            await ProcessLifecycle(uow).transition("P1", current, requested, manager)

        assert store.statuses["P1"] is current
        assert store.history["P1"] == history_before
        assert uow.rollbacks == 1

    @pytest.mark.asyncio
    async def test_completed_process_reports_no_successor(self, manager: User) -> None:
        store = store_with(S.COMPLETED)

        with pytest.raises(InvalidTransitionError, match="no further transitions"):
            await ProcessLifecycle(InMemoryUnitOfWork(store)).transition(
                "P1", S.COMPLETED, S.IN_DEFINITION, manager
            )

    @pytest.mark.asyncio
    async def test_stale_current_status_is_rejected(self, manager: User) -> None:
        store = store_with(S.IN_DEFINITION)

        with pytest.raises(StaleStateError):
            await ProcessLifecycle(InMemoryUnitOfWork(store)).transition(
                "P1", S.IN_SELF_ASSESSMENT, S.AWAITING_MANAGER_ASSESSMENT, manager
            )

        assert store.statuses["P1"] is S.IN_DEFINITION
        assert len(store.history["P1"]) == 1

    @pytest.mark.asyncio
    async def test_employee_is_unauthorized_and_status_unchanged(self, employee: User) -> None:
        store = store_with(S.IN_DEFINITION)

        with pytest.raises(UnauthorizedTransitionError):
            await ProcessLifecycle(InMemoryUnitOfWork(store)).transition(
                "P1", S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, employee
            )

        assert store.statuses["P1"] is S.IN_DEFINITION
        assert len(store.history["P1"]) == 1

    @pytest.mark.asyncio
    async def test_custom_policy_is_consulted(self, manager: User) -> None:
        store = store_with(S.IN_DEFINITION)
        calls = []

        def deny_all(current, requested, roles) -> bool:
            calls.append((current, requested, list(roles)))
            return False

        with pytest.raises(UnauthorizedTransitionError):
            await ProcessLifecycle(InMemoryUnitOfWork(store), policy=deny_all).transition(
                "P1", S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, manager
            )

        assert calls == [(S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, ["manager"])]

    @pytest.mark.asyncio
    async def test_unknown_process_is_not_found(self, manager: User) -> None:
        store = store_with(S.IN_DEFINITION)

        with pytest.raises(ProcessNotFoundError):
            await ProcessLifecycle(InMemoryUnitOfWork(store)).transition(
                "missing", S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, manager
            )


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_two_racing_transitions_yield_one_success_and_one_stale(
        self, manager: User
    ) -> None:
        store = store_with(S.IN_DEFINITION)

        async def attempt():
            return await ProcessLifecycle(InMemoryUnitOfWork(store)).transition(
                "P1", S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, manager
            )

        results = await asyncio.gather(attempt(), attempt(), return_exceptions=True)

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], StaleStateError)
        assert store.statuses["P1"] is S.IN_SELF_ASSESSMENT
        assert [entry.status for entry in store.history["P1"]] == [
            S.IN_DEFINITION,
            S.IN_SELF_ASSESSMENT,
        ]


class TestPersistenceFailure:
    @pytest.mark.asyncio
    async def test_storage_error_rolls_back_status_update(self, manager: User) -> None:
        store = store_with(S.IN_DEFINITION)
        uow = InMemoryUnitOfWork(store, fail_on_append=True)

        with pytest.raises(PersistenceFailureError) as exc_info:
            await ProcessLifecycle(uow).transition(
                "P1", S.IN_DEFINITION, S.IN_SELF_ASSESSMENT, manager
            )

        assert not isinstance(exc_info.value, StaleStateError)
        assert store.statuses["P1"] is S.IN_DEFINITION
        assert len(store.history["P1"]) == 1
        assert uow.rollbacks == 1
        assert uow.commits == 0
