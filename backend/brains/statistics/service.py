# backend/brains/statistics/service.py

"""
ユーザーの利用状況を集計するサービス層。

各集計は独立しており、1 つが失敗してもログを残して 0 として扱い、
残りの集計は続行する。
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from brains.store.client import StoreClient, StoreError, eq, gte

from .schemas import AccountLimits, UserStatisticsResponse

logger = logging.getLogger(__name__)

FREE_MAX_BRAINS = 5
FREE_MAX_API_CALLS = 50

API_CALL_ACTION_TYPE = "openai_api_call"


class AuthenticationError(PermissionError):
    """Authorization ヘッダーからユーザーを解決できない場合の例外。"""

    def __init__(self) -> None:
        super().__init__("Authentication failed")


def first_day_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def account_limits_for(has_pro_subscription: bool) -> AccountLimits:
    if has_pro_subscription:
        return AccountLimits(max_brains=None, max_api_calls=None)
    return AccountLimits(max_brains=FREE_MAX_BRAINS, max_api_calls=FREE_MAX_API_CALLS)


class UserStatisticsService:
    def __init__(self, store: StoreClient) -> None:
        self._store = store

    def resolve_user_id(
        self,
        user_id: Optional[str],
        authorization: Optional[str],
    ) -> str:
        """
        リクエストボディの userId を優先し、無ければ Authorization ヘッダーから解決する。
        """
        if user_id:
            return user_id
        if not authorization:
            raise AuthenticationError()

        try:
            user = self._store.get_user(authorization)
        except StoreError as exc:
            logger.error("Authentication error: %s", exc)
            raise AuthenticationError() from exc

        return user["id"]

    # ---- 個別の集計 ----------------------------------------------------

    def count_api_calls(self, user_id: str, since: datetime) -> int:
        try:
            return self._store.count(
                "user_usage_stats",
                filters={
                    "user_id": eq(user_id),
                    "action_type": eq(API_CALL_ACTION_TYPE),
                    "created_at": gte(since.isoformat()),
                },
            )
        except StoreError as exc:
            logger.error("Error fetching API calls. user_id=%s error=%s", user_id, exc)
            return 0

    def owned_project_ids(self, user_id: str) -> Optional[List[str]]:
        """失敗時は None（共有 brain の重複除外を行わない）。"""
        try:
            rows = self._store.select(
                "projects",
                columns="id",
                filters={"owner_id": eq(user_id), "is_archived": eq(False)},
            )
        except StoreError as exc:
            logger.error("Error fetching owned projects. user_id=%s error=%s", user_id, exc)
            return None
        return [row["id"] for row in rows]

    def count_shared_projects(self, user_id: str, owned_ids: Optional[List[str]]) -> int:
        try:
            rows = self._store.select(
                "project_members",
                columns="project_id",
                filters={"user_id": eq(user_id)},
            )
        except StoreError as exc:
            logger.error("Error fetching member projects. user_id=%s error=%s", user_id, exc)
            return 0

        member_ids = [row["project_id"] for row in rows]
        if owned_ids is None:
            return len(member_ids)
        owned = set(owned_ids)
        return len([pid for pid in member_ids if pid not in owned])

    def count_documents(self, user_id: str) -> int:
        try:
            return self._store.count(
                "project_documents", filters={"user_id": eq(user_id)}
            )
        except StoreError as exc:
            logger.error("Error fetching documents count. user_id=%s error=%s", user_id, exc)
            return 0

    def has_pro_subscription(self, user_id: str) -> bool:
        try:
            row = self._store.select_one(
                "user_subscriptions",
                filters={
                    "user_id": eq(user_id),
                    "is_active": eq(True),
                    "plan_type": eq("pro"),
                },
            )
        except StoreError as exc:
            logger.error("Error checking subscription. user_id=%s error=%s", user_id, exc)
            return False
        return row is not None

    # ---- 公開 API ------------------------------------------------------

    def collect(self, user_id: str, now: Optional[datetime] = None) -> UserStatisticsResponse:
        now = now or datetime.now(timezone.utc)

        owned_ids = self.owned_project_ids(user_id)
        has_pro = self.has_pro_subscription(user_id)

        return UserStatisticsResponse(
            api_calls=self.count_api_calls(user_id, first_day_of_month(now)),
            owned_brains=len(owned_ids or []),
            shared_brains=self.count_shared_projects(user_id, owned_ids),
            documents=self.count_documents(user_id),
            has_pro_subscription=has_pro,
            account_limits=account_limits_for(has_pro),
        )
