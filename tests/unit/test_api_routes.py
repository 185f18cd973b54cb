"""API tests: routing, auth, envelope and error mapping.

Services are rebuilt on the in-memory store and swapped into each router;
get_db_session is overridden to hand out FakeSessions.
"""

from collections.abc import AsyncGenerator, Iterator
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.main import app
from src.sm_activity.api import router as activity_api
from src.sm_activity.application.service import ActivityApplicationService
from src.sm_activity.domain.models import Event
from src.sm_activity.domain.policy import AwardPolicy
from src.sm_admin.api import router as admin_api
from src.sm_admin.application.service import AdminService
from src.sm_common.database import get_db_session
from src.sm_common.datetime_utils import utc_now
from src.sm_gateway.auth.jwt_handler import ROLE_SERVICE, create_access_token
from src.sm_ledger.api import router as points_api
from src.sm_ledger.application.service import PointsApplicationService
from src.sm_rewards.api import router as rewards_api
from src.sm_rewards.application.redemption import RedemptionCoordinator
from src.sm_rewards.application.service import RewardApplicationService
from tests.fakes import (
    FakeActivityRepository,
    FakeLedgerRepository,
    FakeRewardRepository,
    FakeSession,
    InMemoryStore,
)


def _auth(user_id: str = "u1", role: str = "authenticated") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, role=role)}"}


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> Iterator[InMemoryStore]:
    s = InMemoryStore()
    s.businesses[3] = "Main St Bakery"
    s.events[1] = Event(id=1, name="Summer Street Fair")

    cache = AsyncMock()
    cache.get.return_value = None
    ledger = FakeLedgerRepository(s)
    rewards = FakeRewardRepository(s)
    monkeypatch.setattr(points_api, "_service", PointsApplicationService(repo=ledger, cache=cache))
    monkeypatch.setattr(
        rewards_api,
        "_service",
        RewardApplicationService(
            repo=rewards,
            coordinator=RedemptionCoordinator(reward_repo=rewards, ledger_repo=ledger, cache=cache),
        ),
    )
    monkeypatch.setattr(
        activity_api,
        "_service",
        ActivityApplicationService(
            repo=FakeActivityRepository(s),
            policy=AwardPolicy(ledger_repo=ledger),
            cache=cache,
        ),
    )

    async def _fake_session() -> AsyncGenerator[FakeSession, None]:
        yield FakeSession()

    app.dependency_overrides[get_db_session] = _fake_session
    yield s
    app.dependency_overrides.clear()


class TestAuth:
    async def test_missing_token_is_401(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.get("/api/v1/points/balance")
        assert resp.status_code == 401

    async def test_bad_token_is_401(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.get(
            "/api/v1/points/balance", headers={"Authorization": "Bearer nope"}
        )
        assert resp.status_code == 401


class TestPoints:
    async def test_balance(self, client: AsyncClient, store: InMemoryStore) -> None:
        store.credit("u1", 1250)
        resp = await client.get("/api/v1/points/balance", headers=_auth())
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert body["data"] == {"user_id": "u1", "points": 1250, "points_display": "1,250 pts"}
        assert body["request_id"] == resp.headers["X-Request-ID"]

    async def test_ledger_filter(self, client: AsyncClient, store: InMemoryStore) -> None:
        store.credit("u1", 10)
        resp = await client.get(
            "/api/v1/points/ledger", params={"source_kind": "SURVEY"}, headers=_auth()
        )
        assert resp.status_code == 200
        assert len(resp.json()["data"]["items"]) == 1

    async def test_ledger_rejects_unknown_kind(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.get(
            "/api/v1/points/ledger", params={"source_kind": "BOGUS"}, headers=_auth()
        )
        assert resp.status_code == 422


class TestActivityToRedemption:
    async def test_full_flow(self, client: AsyncClient, store: InMemoryStore) -> None:
        item = store.add_item(7, name="Lemonade", business_id=3)

        rsvp = await client.post("/api/v1/activity/rsvps", json={"event_id": 1}, headers=_auth())
        assert rsvp.json()["data"] == {"awarded": True, "points": 2, "points_display": "2 pts"}
        checkin = await client.post(
            "/api/v1/activity/checkins", json={"event_id": 1}, headers=_auth()
        )
        assert checkin.json()["data"]["points"] == 5

        redeem = await client.post(
            "/api/v1/rewards/redeem", json={"reward_item_id": item.id}, headers=_auth()
        )
        assert redeem.status_code == 201
        data = redeem.json()["data"]
        assert data["reward_name"] == "Lemonade"
        assert data["business_name"] == "Main St Bakery"
        assert data["remaining_points"] == 0

        history = await client.get("/api/v1/rewards/redemptions", headers=_auth())
        assert [h["reward_name"] for h in history.json()["data"]["items"]] == ["Lemonade"]

    async def test_checkin_without_rsvp(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.post(
            "/api/v1/activity/checkins", json={"event_id": 1}, headers=_auth()
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 4002

    async def test_unknown_event(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.post("/api/v1/activity/rsvps", json={"event_id": 99}, headers=_auth())
        assert resp.status_code == 404
        assert resp.json()["code"] == 4001

    async def test_history_lists_only_callers_activity(
        self, client: AsyncClient, store: InMemoryStore
    ) -> None:
        await client.post("/api/v1/activity/rsvps", json={"event_id": 1}, headers=_auth())
        await client.post("/api/v1/activity/checkins", json={"event_id": 1}, headers=_auth())
        await client.post("/api/v1/activity/rsvps", json={"event_id": 1}, headers=_auth("u2"))

        rsvps = await client.get("/api/v1/activity/rsvps", headers=_auth())
        checkins = await client.get("/api/v1/activity/checkins", headers=_auth())
        other = await client.get("/api/v1/activity/checkins", headers=_auth("u2"))

        assert rsvps.status_code == 200
        assert [r["event_name"] for r in rsvps.json()["data"]["items"]] == ["Summer Street Fair"]
        items = checkins.json()["data"]["items"]
        assert [(c["event_id"], c["points_earned"]) for c in items] == [(1, 5)]
        assert other.json()["data"]["items"] == []

    async def test_history_requires_auth(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.get("/api/v1/activity/checkins")
        assert resp.status_code == 401

    async def test_history_limit_validation(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.get("/api/v1/activity/rsvps?limit=0", headers=_auth())
        assert resp.status_code == 422


class TestRedeemErrors:
    async def test_insufficient_points(self, client: AsyncClient, store: InMemoryStore) -> None:
        item = store.add_item(50)
        store.credit("u1", 10)
        resp = await client.post(
            "/api/v1/rewards/redeem", json={"reward_item_id": item.id}, headers=_auth()
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 3005
        assert "you need 40 more points" in body["message"]
        assert body["data"] is None

    async def test_expired(self, client: AsyncClient, store: InMemoryStore) -> None:
        item = store.add_item(50, expiration_date=utc_now() - timedelta(days=1))
        store.credit("u1", 1000)
        resp = await client.post(
            "/api/v1/rewards/redeem", json={"reward_item_id": item.id}, headers=_auth()
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 3003

    async def test_not_found(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.post(
            "/api/v1/rewards/redeem", json={"reward_item_id": 12345}, headers=_auth()
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == 3001

    async def test_wrong_business(self, client: AsyncClient, store: InMemoryStore) -> None:
        item = store.add_item(5, business_id=3)
        store.credit("u1", 10)
        resp = await client.post(
            "/api/v1/rewards/redeem",
            json={"reward_item_id": item.id, "business_id": 8},
            headers=_auth(),
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 3006

    async def test_unknown_business(self, client: AsyncClient, store: InMemoryStore) -> None:
        item = store.add_item(5)
        store.credit("u1", 10)
        resp = await client.post(
            "/api/v1/rewards/redeem",
            json={"reward_item_id": item.id, "business_id": 999999},
            headers=_auth(),
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == 3007
        assert store.redemptions == []
        assert store.balance("u1") == 10

    async def test_body_validation(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.post(
            "/api/v1/rewards/redeem", json={"reward_item_id": 0}, headers=_auth()
        )
        assert resp.status_code == 422


class TestAdmin:
    async def test_patron_forbidden(self, client: AsyncClient, store: InMemoryStore) -> None:
        resp = await client.get("/api/v1/admin/invariants", headers=_auth())
        assert resp.status_code == 403
        assert resp.json()["code"] == 1006

    async def test_service_role_allowed(
        self, client: AsyncClient, store: InMemoryStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        svc = AdminService()
        monkeypatch.setattr(
            svc, "verify_all_invariants", AsyncMock(return_value={"ok": True, "violations": []})
        )
        monkeypatch.setattr(admin_api, "_service", svc)
        resp = await client.get("/api/v1/admin/invariants", headers=_auth("ops", ROLE_SERVICE))
        assert resp.status_code == 200
        assert resp.json()["data"]["ok"] is True


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.json() == {"status": "ok", "version": "0.1.0"}
