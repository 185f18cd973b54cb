"""Tests for ActivityApplicationService against the in-memory store."""

from unittest.mock import AsyncMock

import pytest

from src.sm_activity.application.service import ActivityApplicationService
from src.sm_activity.domain.models import Event, Survey
from src.sm_activity.domain.policy import AwardPolicy
from src.sm_common.errors import (
    EventNotFoundError,
    InvalidPointsError,
    RsvpRequiredError,
    SurveyInactiveError,
    SurveyNotFoundError,
)
from tests.fakes import FakeActivityRepository, FakeLedgerRepository, FakeSession, InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.events[1] = Event(id=1, name="Summer Street Fair")
    s.surveys[3] = Survey(id=3, title="Parking", reward_points=25, is_active=True)
    s.surveys[4] = Survey(id=4, title="Old", reward_points=10, is_active=False)
    s.surveys[5] = Survey(id=5, title="Broken", reward_points=-10, is_active=True)
    return s


@pytest.fixture
def cache() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(store: InMemoryStore, cache: AsyncMock) -> ActivityApplicationService:
    return ActivityApplicationService(
        repo=FakeActivityRepository(store),
        policy=AwardPolicy(ledger_repo=FakeLedgerRepository(store)),
        cache=cache,
    )


class TestRsvp:
    async def test_awards_and_records(
        self, service: ActivityApplicationService, store: InMemoryStore, cache: AsyncMock
    ) -> None:
        db = FakeSession()
        resp = await service.rsvp(db, "u1", 1)
        assert resp.awarded is True
        assert resp.points == 2
        assert resp.points_display == "2 pts"
        assert ("u1", 1) in store.rsvps
        assert db.commits == 1
        cache.invalidate.assert_awaited_once_with("u1")

    async def test_repeat_rsvp(self, service: ActivityApplicationService, store: InMemoryStore, cache: AsyncMock) -> None:
        await service.rsvp(FakeSession(), "u1", 1)
        cache.reset_mock()
        resp = await service.rsvp(FakeSession(), "u1", 1)
        assert resp.awarded is False
        assert resp.points == 0
        assert store.balance("u1") == 2
        cache.invalidate.assert_not_called()

    async def test_unknown_event(self, service: ActivityApplicationService) -> None:
        db = FakeSession()
        with pytest.raises(EventNotFoundError):
            await service.rsvp(db, "u1", 404)
        assert db.rollbacks == 1


class TestCheckIn:
    async def test_requires_rsvp(self, service: ActivityApplicationService, store: InMemoryStore) -> None:
        with pytest.raises(RsvpRequiredError):
            await service.check_in(FakeSession(), "u1", 1)
        assert store.balance("u1") == 0
        assert store.checkins == {}

    async def test_repeat_checkin_awards_once(
        self, service: ActivityApplicationService, store: InMemoryStore
    ) -> None:
        await service.rsvp(FakeSession(), "u1", 1)
        first = await service.check_in(FakeSession(), "u1", 1)
        second = await service.check_in(FakeSession(), "u1", 1)
        assert first.awarded is True
        assert first.points == 5
        assert second.awarded is False
        assert store.balance("u1") == 2 + 5


class TestSurvey:
    async def test_repeat_survey_keeps_first_response(
        self, service: ActivityApplicationService, store: InMemoryStore
    ) -> None:
        await service.submit_survey(FakeSession(), "u1", 3, {"q1": "more bike racks"})
        again = await service.submit_survey(FakeSession(), "u1", 3, {"q1": "changed my mind"})
        assert again.awarded is False
        assert store.balance("u1") == 25
        assert store.survey_responses[("u1", 3)] == {"q1": "more bike racks"}

    async def test_missing_survey(self, service: ActivityApplicationService) -> None:
        with pytest.raises(SurveyNotFoundError):
            await service.submit_survey(FakeSession(), "u1", 99, {})

    async def test_inactive_survey(self, service: ActivityApplicationService) -> None:
        with pytest.raises(SurveyInactiveError):
            await service.submit_survey(FakeSession(), "u1", 4, {})

    async def test_invalid_reward_points_writes_nothing(
        self, service: ActivityApplicationService, store: InMemoryStore
    ) -> None:
        db = FakeSession()
        with pytest.raises(InvalidPointsError):
            await service.submit_survey(db, "u1", 5, {})
        assert db.rollbacks == 1
        assert store.survey_responses == {}
        assert store.ledger == []


class TestHistory:
    async def test_lists_own_rsvps_newest_first(
        self, service: ActivityApplicationService, store: InMemoryStore
    ) -> None:
        store.events[2] = Event(id=2, name="Harvest Market")
        await service.rsvp(FakeSession(), "u1", 1)
        await service.rsvp(FakeSession(), "u1", 2)
        await service.rsvp(FakeSession(), "u2", 1)

        resp = await service.list_rsvps(FakeSession(), "u1", None, 20)

        assert [i.event_name for i in resp.items] == ["Harvest Market", "Summer Street Fair"]
        assert resp.has_more is False
        assert resp.next_cursor is None

    async def test_checkins_carry_points(
        self, service: ActivityApplicationService, store: InMemoryStore
    ) -> None:
        await service.rsvp(FakeSession(), "u1", 1)
        await service.check_in(FakeSession(), "u1", 1)

        resp = await service.list_checkins(FakeSession(), "u1", None, 20)

        assert len(resp.items) == 1
        item = resp.items[0]
        assert item.event_id == 1
        assert item.points_earned == 5
        assert item.points_display == "5 pts"

    async def test_cursor_pages_through_rsvps(
        self, service: ActivityApplicationService, store: InMemoryStore
    ) -> None:
        for event_id in (1, 2, 3):
            store.events[event_id] = Event(id=event_id, name=f"Event {event_id}")
            await service.rsvp(FakeSession(), "u1", event_id)

        first = await service.list_rsvps(FakeSession(), "u1", None, 2)
        assert [i.event_id for i in first.items] == [3, 2]
        assert first.has_more is True

        second = await service.list_rsvps(FakeSession(), "u1", first.next_cursor, 2)
        assert [i.event_id for i in second.items] == [1]
        assert second.has_more is False

    async def test_rolled_back_checkin_is_not_listed(
        self, service: ActivityApplicationService, store: InMemoryStore
    ) -> None:
        with pytest.raises(RsvpRequiredError):
            await service.check_in(FakeSession(), "u1", 1)

        resp = await service.list_checkins(FakeSession(), "u1", None, 20)
        assert resp.items == []
