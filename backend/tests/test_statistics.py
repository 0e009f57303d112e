# backend/tests/test_statistics.py

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from brains.main import create_app
from brains.statistics.router import get_user_statistics_service
from brains.statistics.service import (
    AuthenticationError,
    UserStatisticsService,
    first_day_of_month,
)
from brains.store.client import StoreError


class FakeStatsStore:
    """テーブルごとの返り値を dict で持つ統計用のフェイクストア。"""

    def __init__(self, *, counts=None, rows=None, subscription=None, failing=(), user=None):
        self.counts = counts or {}
        self.rows = rows or {}
        self.subscription = subscription
        self.failing = set(failing)
        self.user = user
        self.count_filters = {}

    def _check(self, table):
        if table in self.failing:
            raise StoreError(f"{table} unavailable")

    def count(self, table, *, filters=None):
        self._check(table)
        self.count_filters[table] = filters
        return self.counts.get(table, 0)

    def select(self, table, *, columns="*", filters=None):
        self._check(table)
        return self.rows.get(table, [])

    def select_one(self, table, *, columns="*", filters=None):
        self._check(table)
        return self.subscription

    def get_user(self, authorization):
        if self.user is None:
            raise StoreError("invalid JWT")
        return self.user


def _store(**kwargs):
    defaults = dict(
        counts={"user_usage_stats": 7, "project_documents": 3},
        rows={
            "projects": [{"id": "p1"}, {"id": "p2"}],
            "project_members": [{"project_id": "p1"}, {"project_id": "p3"}, {"project_id": "p4"}],
        },
    )
    defaults.update(kwargs)
    return FakeStatsStore(**defaults)


def test_collect_free_plan():
    store = _store()
    now = datetime(2024, 5, 17, 12, 30, tzinfo=timezone.utc)

    stats = UserStatisticsService(store).collect("user-1", now=now)

    assert stats.api_calls == 7
    assert stats.owned_brains == 2
    assert stats.shared_brains == 2
    assert stats.documents == 3
    assert stats.has_pro_subscription is False
    assert stats.account_limits.max_brains == 5
    assert stats.account_limits.max_api_calls == 50
    assert store.count_filters["user_usage_stats"]["created_at"] == "gte.2024-05-01T00:00:00+00:00"
    assert store.count_filters["user_usage_stats"]["action_type"] == "eq.openai_api_call"


def test_collect_pro_plan_is_unlimited():
    stats = UserStatisticsService(_store(subscription={"id": "sub-1"})).collect("user-1")

    assert stats.has_pro_subscription is True
    assert stats.account_limits.max_brains is None
    assert stats.account_limits.max_api_calls is None


def test_failed_queries_count_as_zero():
    store = _store(failing={"user_usage_stats", "projects"})

    stats = UserStatisticsService(store).collect("user-1")

    assert stats.api_calls == 0
    assert stats.owned_brains == 0
    # 所有 brain が取れない場合は重複除外しない
    assert stats.shared_brains == 3
    assert stats.documents == 3


def test_first_day_of_month():
    now = datetime(2024, 2, 29, 23, 59, 59, 999, tzinfo=timezone.utc)
    assert first_day_of_month(now) == datetime(2024, 2, 1, tzinfo=timezone.utc)


def test_resolve_user_prefers_body():
    service = UserStatisticsService(_store())
    assert service.resolve_user_id("user-1", "Bearer ignored") == "user-1"


def test_resolve_user_from_authorization():
    service = UserStatisticsService(_store(user={"id": "user-from-jwt"}))
    assert service.resolve_user_id(None, "Bearer jwt") == "user-from-jwt"


def test_resolve_user_authentication_failed():
    service = UserStatisticsService(_store())

    with pytest.raises(AuthenticationError, match="Authentication failed"):
        service.resolve_user_id(None, "Bearer bad")
    with pytest.raises(AuthenticationError):
        service.resolve_user_id(None, None)


def _client(store) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_user_statistics_service] = lambda: UserStatisticsService(store)
    return TestClient(app)


def test_endpoint_returns_camel_case():
    resp = _client(_store()).post("/user-statistics", json={"userId": "user-1"})

    assert resp.status_code == 200
    assert resp.json() == {
        "apiCalls": 7,
        "ownedBrains": 2,
        "sharedBrains": 2,
        "documents": 3,
        "hasProSubscription": False,
        "accountLimits": {"maxBrains": 5, "maxApiCalls": 50},
        "status": "success",
    }


def test_endpoint_pro_limits_are_null():
    resp = _client(_store(subscription={"id": "s"})).post("/user-statistics", json={"userId": "u"})

    assert resp.json()["accountLimits"] == {"maxBrains": None, "maxApiCalls": None}


def test_endpoint_uses_authorization_header():
    client = _client(_store(user={"id": "jwt-user"}))

    resp = client.post("/user-statistics", headers={"Authorization": "Bearer jwt"})

    assert resp.status_code == 200
    assert resp.json()["status"] == "success"


def test_endpoint_authentication_failed():
    resp = _client(_store()).post("/user-statistics", json={})

    assert resp.status_code == 401
    assert resp.json() == {"status": "error", "message": "Authentication failed"}


def test_endpoint_malformed_body_falls_back_to_authorization():
    client = _client(_store(user={"id": "jwt-user"}))

    resp = client.post(
        "/user-statistics",
        content=b"{not json",
        headers={"Content-Type": "application/json", "Authorization": "Bearer jwt"},
    )

    assert resp.status_code == 200
    assert resp.json()["status"] == "success"


def test_endpoint_malformed_body_without_authorization():
    resp = _client(_store()).post("/user-statistics", json={"userId": 123})

    assert resp.status_code == 401
    assert resp.json() == {"status": "error", "message": "Authentication failed"}
