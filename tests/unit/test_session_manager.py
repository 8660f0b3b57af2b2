"""Tests for the session manager and session store."""

import asyncio
from datetime import datetime, timedelta

import pytest

from alumni_search.core.config import SessionConfig
from alumni_search.core.schemas import (
    Profile,
    RankedResult,
    SearchIntent,
    SearchSession,
    SessionStatus,
)
from alumni_search.session.manager import SessionManager
from alumni_search.session.store import InMemorySessionStore

START = datetime(2026, 10, 19, 9, 0)


class Clock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def _results(n: int) -> list[RankedResult]:
    return [
        RankedResult(
            profile=Profile(id=str(i), identity={"full_name": f"Member {i}"}),  # type: ignore[arg-type]
            score=100 - i,
        )
        for i in range(n)
    ]


@pytest.fixture()
def clock() -> Clock:
    return Clock()


@pytest.fixture()
def manager(clock: Clock) -> SessionManager:
    return SessionManager(InMemorySessionStore(), SessionConfig(), now=clock)


class TestGetOrCreate:
    def test_creates_once(self, manager: SessionManager) -> None:
        first = manager.get_or_create("u1")
        assert manager.get_or_create("u1") is first
        assert first.created_at == START

    def test_touches_last_activity(self, manager: SessionManager, clock: Clock) -> None:
        session = manager.get_or_create("u1")
        clock.advance(minutes=10)
        manager.get_or_create("u1")
        assert session.last_activity == START + timedelta(minutes=10)

    def test_expired_session_replaced(self, manager: SessionManager, clock: Clock) -> None:
        old = manager.get_or_create("u1")
        manager.record_search(old, "python", SearchIntent(skills=["python"]), _results(5))
        clock.advance(minutes=31)
        fresh = manager.get_or_create("u1")
        assert fresh is not old
        assert fresh.ranked_results == []
        assert fresh.last_intent is None

    def test_users_are_independent(self, manager: SessionManager) -> None:
        a = manager.get_or_create("a")
        manager.record_search(a, "python", SearchIntent(), _results(5))
        assert manager.get_or_create("b").ranked_results == []


class TestPaging:
    def test_record_search_shows_first_page(self, manager: SessionManager) -> None:
        session = manager.get_or_create("u1")
        manager.record_search(session, "q", SearchIntent(), _results(7))
        assert session.shown_count == 3
        assert [r.profile.id for r in manager.first_page(session)] == ["0", "1", "2"]

    def test_seven_results_page_three_three_one(self, manager: SessionManager) -> None:
        session = manager.get_or_create("u1")
        manager.record_search(session, "q", SearchIntent(), _results(7))

        page = manager.next_page(session)
        assert [r.profile.id for r in page] == ["3", "4", "5"]
        assert session.remaining == 1
        assert session.status is SessionStatus.ACTIVE

        page = manager.next_page(session)
        assert [r.profile.id for r in page] == ["6"]
        assert session.status is SessionStatus.EXHAUSTED

        assert manager.next_page(session) == []
        assert session.shown_count == 7

    def test_fewer_results_than_first_page(self, manager: SessionManager) -> None:
        session = manager.get_or_create("u1")
        manager.record_search(session, "q", SearchIntent(), _results(2))
        assert session.shown_count == 2
        assert session.status is SessionStatus.EXHAUSTED

    def test_custom_page_size(self, manager: SessionManager) -> None:
        session = manager.get_or_create("u1")
        manager.record_search(session, "q", SearchIntent(), _results(10))
        assert len(manager.next_page(session, page_size=5)) == 5
        assert session.shown_count == 8

    def test_new_search_replaces_results(self, manager: SessionManager) -> None:
        session = manager.get_or_create("u1")
        manager.record_search(session, "first", SearchIntent(), _results(7))
        manager.next_page(session)
        manager.record_search(session, "second", SearchIntent(), _results(4))
        assert session.last_query == "second"
        assert session.shown_count == 3
        assert session.total == 4


class TestFollowUp:
    def test_phrases(self, manager: SessionManager) -> None:
        assert manager.is_follow_up_phrase("more")
        assert manager.is_follow_up_phrase("show  more")
        assert not manager.is_follow_up_phrase("more python developers")

    def test_requires_unshown_results(self, manager: SessionManager) -> None:
        session = manager.get_or_create("u1")
        assert not manager.is_follow_up("more", session)
        manager.record_search(session, "q", SearchIntent(), _results(4))
        assert manager.is_follow_up("more", session)
        manager.next_page(session)
        assert not manager.is_follow_up("more", session)

    def test_not_a_follow_up_without_session(self, manager: SessionManager) -> None:
        assert not manager.is_follow_up("more", None)

    def test_expired_session_is_not_followed(self, manager: SessionManager, clock: Clock) -> None:
        session = manager.get_or_create("u1")
        manager.record_search(session, "q", SearchIntent(), _results(7))
        clock.advance(minutes=31)
        assert not manager.is_follow_up("more", session)

    def test_custom_phrases(self, clock: Clock) -> None:
        manager = SessionManager(follow_up_phrases=["aur"], now=clock)
        assert manager.is_follow_up_phrase("aur")
        assert not manager.is_follow_up_phrase("more")


class TestLifecycle:
    def test_reset(self, manager: SessionManager) -> None:
        manager.get_or_create("u1")
        assert manager.reset("u1") is True
        assert manager.get("u1") is None
        assert manager.reset("u1") is False

    def test_sweep_expired(self, manager: SessionManager, clock: Clock) -> None:
        manager.get_or_create("old")
        clock.advance(minutes=20)
        manager.get_or_create("new")
        clock.advance(minutes=15)
        assert manager.sweep_expired() == 1
        assert manager.get("old") is None
        assert manager.get("new") is not None

    def test_maybe_sweep_waits_a_full_ttl(self, manager: SessionManager, clock: Clock) -> None:
        manager.get_or_create("u1")
        clock.advance(minutes=20)
        assert manager.maybe_sweep() == 0
        clock.advance(minutes=15)
        assert manager.maybe_sweep() == 1
        assert manager.maybe_sweep() == 0  # just swept

    def test_sweep_drops_idle_locks(self, manager: SessionManager, clock: Clock) -> None:
        old_lock = manager.lock("u1")
        manager.get_or_create("u1")
        clock.advance(minutes=31)
        manager.maybe_sweep()
        assert manager.lock("u1") is not old_lock

    async def test_sweep_keeps_held_lock(self, manager: SessionManager, clock: Clock) -> None:
        lock = manager.lock("u1")
        manager.get_or_create("u1")
        clock.advance(minutes=31)
        async with lock:
            manager.sweep_expired()
            assert manager.lock("u1") is lock

    def test_get_drops_expired(self, manager: SessionManager, clock: Clock) -> None:
        manager.get_or_create("u1")
        clock.advance(minutes=30, seconds=1)
        assert manager.get("u1") is None


class TestLocks:
    def test_same_lock_per_user(self, manager: SessionManager) -> None:
        assert manager.lock("a") is manager.lock("a")
        assert manager.lock("a") is not manager.lock("b")

    async def test_lock_serializes_one_user(self, manager: SessionManager) -> None:
        order: list[str] = []

        async def worker(tag: str) -> None:
            async with manager.lock("u1"):
                order.append(f"{tag}-start")
                await asyncio.sleep(0.01)
                order.append(f"{tag}-end")

        await asyncio.gather(worker("a"), worker("b"))
        assert order == ["a-start", "a-end", "b-start", "b-end"]


class TestInMemorySessionStore:
    def test_put_get_delete(self) -> None:
        store = InMemorySessionStore()
        store.put(SearchSession(user_id="u1"))
        assert store.get("u1") is not None
        assert len(store) == 1
        assert store.delete("u1") is True
        assert store.get("u1") is None

    def test_sweep(self) -> None:
        store = InMemorySessionStore()
        store.put(SearchSession(user_id="old", last_activity=START))
        store.put(SearchSession(user_id="new", last_activity=START + timedelta(hours=1)))
        assert store.sweep(START + timedelta(minutes=30)) == 1
        assert len(store) == 1
