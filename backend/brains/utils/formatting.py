# backend/brains/utils/formatting.py

"""
Markdown 風テキストの整形パス。

Notion から変換した本文と、LLM が生成した要約の両方に同じ整形をかける。
各ルールは前のルールの出力に対して順番に適用されるため、並び順に意味がある。

| # | ルール                      | 入力例                 | 出力例                   |
|---|-----------------------------|------------------------|--------------------------|
| 1 | collapse_blank_lines        | "a\\n\\n\\n\\nb"       | "a\\n\\nb"               |
| 2 | normalize_bullets           | "- a\\n* b"            | "• a\\n• b"              |
| 3 | blank_line_before_heading   | "a\\n# H"              | "a\\n\\n# H"             |
| 4 | blank_line_after_heading    | "# H\\n• a"            | "# H\\n\\n• a"           |
| 5 | paragraph_spacing           | "a\\nb"                | "a\\n\\nb"               |
| 6 | collapse_spaces             | "a   b"                | "a b"                    |
| 7 | strip                       | "  a  "                | "a"                      |

整形済みのテキストにもう一度かけても結果は変わらない（冪等）。
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Union

_HEADING = r"[ \t]*#{1,6}[ \t]"

Replacement = Union[str, Callable[["re.Match[str]"], str]]


@dataclass(frozen=True)
class RewriteRule:
    """1 つの正規表現置換ルール。"""

    name: str
    pattern: "re.Pattern[str]"
    replacement: Replacement

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


REWRITE_RULES: List[RewriteRule] = [
    # 3 行以上の連続改行は空行 1 つにまとめる
    RewriteRule(
        name="collapse_blank_lines",
        pattern=re.compile(r"\n{3,}"),
        replacement="\n\n",
    ),
    # 行頭の -, *, • （直後が空白か行末のもの）を "• " に揃える。インデントは保持。
    # "---" や "**太字**" はマーカーとして扱わない。
    RewriteRule(
        name="normalize_bullets",
        pattern=re.compile(r"^([ \t]*)[-*•](?:[ \t]+|$)", re.MULTILINE),
        replacement=r"\1• ",
    ),
    RewriteRule(
        name="blank_line_before_heading",
        pattern=re.compile(r"(?<=[^\n])\n(?=" + _HEADING + ")"),
        replacement="\n\n",
    ),
    RewriteRule(
        name="blank_line_after_heading",
        pattern=re.compile(r"^(" + _HEADING + r"[^\n]*)\n(?=[^\n])", re.MULTILINE),
        replacement=r"\1\n\n",
    ),
    # 見出し・空白・箇条書きで始まらない行の前には空行を入れる
    RewriteRule(
        name="paragraph_spacing",
        pattern=re.compile(r"(?<=[^\n])\n(?=[^#\s•\-])"),
        replacement="\n\n",
    ),
    RewriteRule(
        name="collapse_spaces",
        pattern=re.compile(r"[ \t]{2,}"),
        replacement=" ",
    ),
]


def apply_rule(name: str, text: str) -> str:
    """
    名前を指定して 1 ルールだけ適用する（主にテスト・デバッグ用）。
    """
    for rule in REWRITE_RULES:
        if rule.name == name:
            return rule.apply(text)
    raise KeyError(f"Unknown rewrite rule: {name}")


def format_text(text: str) -> str:
    """
    REWRITE_RULES を順番に適用し、最後に前後の空白を取り除く。

    空文字列や None 相当の入力には空文字列を返す。
    """
    if not text:
        return ""

    for rule in REWRITE_RULES:
        text = rule.apply(text)

    return text.strip()
