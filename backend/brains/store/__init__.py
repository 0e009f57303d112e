# backend/brains/store/__init__.py

"""
マネージドデータベース（PostgREST / Auth API）とのやり取りをまとめるモジュール群。

- client: REST API の薄いラッパー
- notes: project_notes への書き込み
- projects: プロジェクトへのアクセス権確認
- connections: ユーザーごとの Notion 接続情報
"""
