# backend/tests/conftest.py
"""
Pytest configuration for the Brains backend tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import brains.*` works correctly in tests.
- Ensures required environment variables for tests are set
  with safe dummy values (e.g., SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY).
- Provides in-memory fakes for the store and the Notion client.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        # Insert at the beginning so it has priority over site-packages, etc.
        sys.path.insert(0, project_root_str)


def _ensure_test_env_vars() -> None:
    """
    Set dummy environment variables required for tests.

    These values are only for local testing and do NOT contain real secrets.
    """
    os.environ.setdefault("SUPABASE_URL", "https://dummy-project.example.com")
    os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "dummy-service-role-key-for-tests")


_ensure_project_root_in_sys_path()
_ensure_test_env_vars()


from brains.notion.client import NotionAPIError  # noqa: E402
from brains.store.client import StoreError  # noqa: E402


def rich_text(*parts: str) -> List[Dict[str, Any]]:
    return [{"type": "text", "plain_text": part} for part in parts]


def make_block(
    block_type: str,
    *texts: str,
    block_id: Optional[str] = None,
    has_children: bool = False,
    **payload: Any,
) -> Dict[str, Any]:
    """Notion API 形式のブロック dict を組み立てる。"""
    body: Dict[str, Any] = dict(payload)
    if texts or block_type not in ("divider", "child_page", "table", "column_list"):
        body.setdefault("rich_text", rich_text(*texts))
    return {
        "object": "block",
        "id": block_id or f"{block_type}-id",
        "type": block_type,
        "has_children": has_children,
        block_type: body,
    }


class FakeNotionClient:
    """
    ページ・子ブロックを dict で持つ NotionClient のフェイク。

    failing_ids に含まれる ID の子ブロック取得は NotionAPIError になる。
    """

    def __init__(
        self,
        page: Dict[str, Any],
        children: Dict[str, List[Dict[str, Any]]],
        *,
        failing_ids: Optional[set] = None,
        databases: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.page = page
        self.children = children
        self.failing_ids = failing_ids or set()
        self.databases = databases or []
        self.calls: List[tuple] = []

    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        self.calls.append(("page", page_id, None))
        return self.page

    def list_block_children(self, block_id: str, page_size: Optional[int] = None):
        self.calls.append(("children", block_id, page_size))
        if block_id in self.failing_ids:
            raise NotionAPIError(500, "boom")
        return self.children.get(block_id, [])

    def search_databases(self, page_size: int = 100):
        self.calls.append(("search", None, page_size))
        return self.databases


class FakeStore:
    """StoreClient のフェイク。insert された行は inserted に残る。"""

    def __init__(
        self,
        *,
        is_member: bool = True,
        owner_id: Optional[str] = "user-1",
        connection: Optional[Dict[str, Any]] = None,
        insert_error: Optional[StoreError] = None,
    ) -> None:
        self.is_member = is_member
        self.owner_id = owner_id
        self.connection = (
            connection
            if connection is not None
            else {"access_token": "secret-token", "workspace_name": "Team Space"}
        )
        self.insert_error = insert_error
        self.inserted: List[Dict[str, Any]] = []

    def rpc(self, function: str, params: Dict[str, Any]) -> Any:
        return self.is_member

    def select_one(self, table: str, *, columns: str = "*", filters=None):
        if table == "projects":
            return {"owner_id": self.owner_id}
        if table == "notion_connections":
            return self.connection or None
        return None

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        if self.insert_error is not None:
            raise self.insert_error
        created = {"id": f"note-{len(self.inserted) + 1}", **row}
        self.inserted.append({"table": table, **created})
        return created


@pytest.fixture
def fake_store():
    return FakeStore


@pytest.fixture
def fake_notion_client():
    return FakeNotionClient


@pytest.fixture
def block():
    return make_block


@pytest.fixture
def q3_plan_page():
    """ "Q3 Plan" ページ（Name プロパティ + 見出しと箇条書き 2 件）。"""
    page = {
        "object": "page",
        "id": "page-q3",
        "url": "https://www.notion.so/Q3-Plan-page-q3",
        "properties": {
            "Name": {"id": "title", "type": "title", "title": rich_text("Q3 Plan")},
        },
    }
    children = {
        "page-q3": [
            make_block("heading_1", "Goals", block_id="b1"),
            make_block("bulleted_list_item", "Grow 10%", block_id="b2"),
            make_block("bulleted_list_item", "Ship v2", block_id="b3"),
        ]
    }
    return page, children


class FakeLLMClient:
    """LLMClient のフェイク。呼び出し内容を calls に残す。"""

    def __init__(self, *, claude=True, openai=True, reply="Summary\n- a\n- b", error=None):
        self.has_claude = claude
        self.has_openai = openai
        self.reply = reply
        self.error = error
        self.calls: List[tuple] = []

    def claude_message(self, prompt, *, max_tokens):
        self.calls.append(("claude", prompt, max_tokens))
        return self.reply

    def openai_chat(self, messages, *, max_tokens, temperature=None):
        self.calls.append(("openai", messages, max_tokens, temperature))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_llm_client():
    return FakeLLMClient
