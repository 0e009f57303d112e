# backend/brains/store/projects.py

"""
プロジェクト（brain）へのアクセス権確認。
"""

import logging

from .client import StoreClient, StoreError, eq

logger = logging.getLogger(__name__)


class ProjectAccessError(PermissionError):
    """ユーザーがプロジェクトにアクセスできない場合の例外。"""

    def __init__(self) -> None:
        super().__init__("You don't have access to this project")


def ensure_project_access(store: StoreClient, project_id: str, user_id: str) -> None:
    """
    メンバー（rpc/is_project_member）かオーナーであれば通す。

    両方の問い合わせが失敗した場合、またはどちらでも権限が確認できない場合は
    ProjectAccessError を投げる。
    """
    is_member = False
    owner_id = None
    member_failed = owner_failed = False

    try:
        is_member = bool(
            store.rpc("is_project_member", {"project_id": project_id, "user_id": user_id})
        )
    except StoreError as exc:
        member_failed = True
        logger.warning(
            "Membership check failed. project_id=%s error=%s", project_id, exc
        )

    try:
        project = store.select_one(
            "projects", columns="owner_id", filters={"id": eq(project_id)}
        )
        owner_id = project.get("owner_id") if project else None
    except StoreError as exc:
        owner_failed = True
        logger.warning("Owner lookup failed. project_id=%s error=%s", project_id, exc)

    if (member_failed and owner_failed) or (not is_member and owner_id != user_id):
        raise ProjectAccessError()
