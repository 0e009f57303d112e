# backend/brains/notion/__init__.py

"""
Notion 連携用モジュール群。

主な責務:
- Notion API からページ・ブロックを取得する（fetcher / client）
- ページタイトルを推定する（title）
- ブロックツリーを Markdown 風テキストに変換する（converter）
- 変換結果をプロジェクトノートとして保存する（service）
"""
