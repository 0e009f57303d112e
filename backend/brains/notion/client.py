# backend/brains/notion/client.py

"""
Notion API との通信を担当するクライアントモジュール。
"""

from typing import Any, Dict, List, Optional

import httpx

from .config import NotionConfig, get_notion_config


class NotionClientError(RuntimeError):
    """Notion クライアント全般の例外。"""


class NotionAPIError(NotionClientError):
    """Notion API が 2xx 以外を返した場合のエラー。"""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Notion API error: {message}")
        self.status_code = status_code
        self.message = message


class NotionAuthError(NotionAPIError):
    """認証・権限関連のエラー（401 / 403）。"""


class NotionClient:
    """
    Notion API の薄いラッパークライアント。

    - ページ情報の取得
    - ブロック子要素の取得
    - データベース検索

    アクセストークンはユーザーごとに異なるため、インスタンス生成時に渡す。
    """

    def __init__(
        self,
        access_token: str,
        config: Optional[NotionConfig] = None,
    ) -> None:
        self._access_token = access_token
        self.config = config or get_notion_config()

    def _build_headers(self) -> Dict[str, str]:
        """
        Notion API 呼び出しに必要なヘッダーを構築。
        """
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Notion-Version": self.config.api_version,
            "Content-Type": "application/json",
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        2xx 以外のレスポンスを例外に変換する。

        Notion のエラーボディ {"object": "error", "message": "..."} の message を引き継ぐ。
        """
        if response.status_code // 100 == 2:
            return

        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("message") if isinstance(body, dict) else None
        message = message or "Unknown error"

        if response.status_code in (401, 403):
            raise NotionAuthError(response.status_code, message)
        raise NotionAPIError(response.status_code, message)

    @staticmethod
    def _decode_json(response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise NotionClientError("Invalid JSON from Notion API") from exc

        if not isinstance(data, dict):
            raise NotionClientError(
                "Unexpected Notion API response format: body is not an object."
            )
        return data

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.config.api_base_url}{path}"

        try:
            response = httpx.get(
                url,
                headers=self._build_headers(),
                params=params,
                timeout=self.config.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to call Notion API: {exc}") from exc

        self._raise_for_status(response)
        return self._decode_json(response)

    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        """
        GET /pages/{page_id} でページのメタデータ（properties, url など）を取得する。
        """
        return self._get(f"/pages/{page_id}")

    def list_block_children(
        self,
        block_id: str,
        page_size: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        GET /blocks/{block_id}/children の最初の 1 ページ分の results を返す。

        next_cursor は追わない。page_size 未指定時は Notion 側のデフォルトに任せる。
        """
        params = {"page_size": page_size} if page_size is not None else None
        data = self._get(f"/blocks/{block_id}/children", params=params)

        results = data.get("results", [])
        if not isinstance(results, list):
            raise NotionClientError(
                "Unexpected Notion API response format: 'results' is not a list."
            )
        return results

    def search_databases(self, page_size: int = 100) -> List[Dict[str, Any]]:
        """
        POST /search で、最終更新日時の降順にデータベース一覧を取得する。
        """
        url = f"{self.config.api_base_url}/search"
        payload: Dict[str, Any] = {
            "filter": {"value": "database", "property": "object"},
            "sort": {"direction": "descending", "timestamp": "last_edited_time"},
            "page_size": page_size,
        }

        try:
            response = httpx.post(
                url,
                headers=self._build_headers(),
                json=payload,
                timeout=self.config.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to call Notion API: {exc}") from exc

        self._raise_for_status(response)

        results = self._decode_json(response).get("results") or []
        if not isinstance(results, list):
            raise NotionClientError(
                "Unexpected Notion API response format: 'results' is not a list."
            )
        return results
