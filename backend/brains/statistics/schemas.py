# backend/brains/statistics/schemas.py

"""
/user-statistics 用のスキーマ定義。

フロントエンドとの互換のため、レスポンスは camelCase（alias）で返す。
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserStatisticsRequest(BaseModel):
    """
    userId を省略した場合は Authorization ヘッダーからユーザーを解決する。
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")


class AccountLimits(BaseModel):
    """プランごとの上限。None は無制限。"""

    model_config = ConfigDict(populate_by_name=True)

    max_brains: Optional[int] = Field(..., alias="maxBrains")
    max_api_calls: Optional[int] = Field(..., alias="maxApiCalls")


class UserStatisticsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_calls: int = Field(0, ge=0, alias="apiCalls", description="今月の OpenAI API 呼び出し回数")
    owned_brains: int = Field(0, ge=0, alias="ownedBrains", description="所有しているアーカイブ前の brain 数")
    shared_brains: int = Field(0, ge=0, alias="sharedBrains", description="メンバーとして参加している（所有分を除く）brain 数")
    documents: int = Field(0, ge=0)
    has_pro_subscription: bool = Field(False, alias="hasProSubscription")
    account_limits: AccountLimits = Field(..., alias="accountLimits")
    status: str = "success"
