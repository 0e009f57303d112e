# backend/brains/store/client.py

"""
マネージドデータベースの REST (PostgREST) / Auth API を呼び出すクライアント。

サービスロールキーで認証し、テーブルの select / insert / count と RPC を提供する。
フィルタは PostgREST の書式（{"user_id": "eq.<id>"} など）でそのまま渡す。
"""

from typing import Any, Dict, List, Optional

import httpx

from .config import StoreConfig, get_store_config


class StoreError(RuntimeError):
    """ストア呼び出し全般の例外。"""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


def eq(value: Any) -> str:
    """PostgREST の等価フィルタ値を作る。"""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"eq.{value}"


def gte(value: Any) -> str:
    return f"gte.{value}"


def _parse_total_count(content_range: Optional[str]) -> int:
    """
    Content-Range ヘッダー（例: "0-24/3573", "*/0"）から総件数を取り出す。
    """
    if not content_range or "/" not in content_range:
        return 0
    total = content_range.rsplit("/", 1)[1]
    try:
        return int(total)
    except ValueError:
        return 0


class StoreClient:
    """
    REST / Auth API の薄いラッパークライアント。
    """

    def __init__(self, config: Optional[StoreConfig] = None) -> None:
        self.config = config or get_store_config()

    def _build_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.config.service_role_key,
            "Authorization": f"Bearer {self.config.service_role_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        2xx 以外のレスポンスを StoreError に変換する。

        PostgREST のエラーボディ {"message", "code", ...} を引き継ぐ。
        """
        if response.status_code // 100 == 2:
            return

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = (
            body.get("message")
            or body.get("msg")
            or body.get("error_description")
            or f"Store request failed with status {response.status_code}"
        )
        raise StoreError(
            message,
            status_code=response.status_code,
            code=body.get("code"),
        )

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        try:
            response = httpx.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers or self._build_headers(),
                timeout=self.config.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise StoreError(f"Failed to call store API: {exc}") from exc

        self._raise_for_status(response)
        return response

    # ---- テーブル操作 --------------------------------------------------

    def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Optional[Dict[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"select": columns}
        params.update(filters or {})

        response = self._request(
            "GET", f"{self.config.rest_url}/{table}", params=params
        )
        rows = response.json()
        if not isinstance(rows, list):
            raise StoreError(f"Unexpected response format from table '{table}'.")
        return rows

    def select_one(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Optional[Dict[str, str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """条件に合う最初の 1 行。無ければ None。"""
        rows = self.select(table, columns=columns, filters=filters)
        return rows[0] if rows else None

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        1 行 insert して、生成された id などを含む行をそのまま返す。
        """
        response = self._request(
            "POST",
            f"{self.config.rest_url}/{table}",
            json=row,
            headers=self._build_headers({"Prefer": "return=representation"}),
        )
        rows = response.json()
        if isinstance(rows, list):
            if not rows:
                raise StoreError(f"Insert into '{table}' returned no rows.")
            return rows[0]
        return rows

    def count(self, table: str, *, filters: Optional[Dict[str, str]] = None) -> int:
        """
        HEAD リクエスト + Prefer: count=exact で件数だけを取得する。
        """
        params: Dict[str, Any] = {"select": "id"}
        params.update(filters or {})

        response = self._request(
            "HEAD",
            f"{self.config.rest_url}/{table}",
            params=params,
            headers=self._build_headers({"Prefer": "count=exact"}),
        )
        return _parse_total_count(response.headers.get("content-range"))

    def rpc(self, function: str, params: Dict[str, Any]) -> Any:
        response = self._request(
            "POST", f"{self.config.rest_url}/rpc/{function}", json=params
        )
        if not response.content:
            return None
        return response.json()

    # ---- Auth ----------------------------------------------------------

    def get_user(self, authorization: str) -> Dict[str, Any]:
        """
        リクエストの Authorization ヘッダー（Bearer <JWT>）からユーザーを解決する。
        """
        apikey = self.config.anon_key or self.config.service_role_key
        response = self._request(
            "GET",
            f"{self.config.auth_url}/user",
            headers={"apikey": apikey, "Authorization": authorization},
        )
        user = response.json()
        if not isinstance(user, dict) or not user.get("id"):
            raise StoreError("Authentication failed", status_code=response.status_code)
        return user
