"""HTML からのテキスト抽出・整形ヘルパー。"""

from __future__ import annotations

import html
import re

_STYLE_RE = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_SPACES_RE = re.compile(r"\s+")
_HANGUL_RE = re.compile(r"[\u3131-\uD79D]")

_DOCTYPE_RE = re.compile(r"<!DOCTYPE[\s\S]*?>", re.IGNORECASE)
_HEAD_RE = re.compile(r"<head[\s\S]*?>([\s\S]*?)</head>", re.IGNORECASE)
_BODY_RE = re.compile(r"<body[^>]*>([\s\S]*?)</body>", re.IGNORECASE)
_HTML_TAG_RE = re.compile(r"</?html[^>]*>", re.IGNORECASE)

_FENCE_OPEN_RE = re.compile(r"^```[a-zA-Z0-9]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_PREFACE_RE = re.compile(
    r"^\s*(here\s+is|here's|below\s+is|translated|translation)[:\-\s]+", re.IGNORECASE
)
_HEADING_RE = re.compile(r"^\s*#{1,6}\s+")


def strip_html(source: str | None) -> str:
    """style/script ブロックとタグを除去し、空白をまとめたテキストを返す。"""

    if not source:
        return ""
    text = _STYLE_RE.sub("", source)
    text = _SCRIPT_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    return _SPACES_RE.sub(" ", text).strip()


def korean_ratio(text: str | None) -> float:
    """ハングル文字 (U+3131–U+D79D) が占める割合。空文字は 0。"""

    if not text:
        return 0.0
    return len(_HANGUL_RE.findall(text)) / len(text)


def extract_head_and_body(source: str | None) -> tuple[str, str]:
    """
    HTML から `<head>` の中身と `<body>` の中身を取り出す。

    `<body>` が無い場合は入力全体から `<html>` タグだけを除いたものを本文とする。
    """

    if not source:
        return "", source or ""

    body = _DOCTYPE_RE.sub("", source, count=1).strip()
    head = ""
    head_match = _HEAD_RE.search(body)
    if head_match:
        head = head_match.group(1)

    body_match = _BODY_RE.search(body)
    if body_match:
        body = body_match.group(1)
    else:
        body = _HTML_TAG_RE.sub("", body)
    return head, body


def clean_model_output(text: str | None) -> str:
    """コードフェンスや「Here is ...」などの前置きをモデル出力から取り除く。"""

    if not text:
        return ""
    out = strip_code_fences(text)
    out = _PREFACE_RE.sub("", out, count=1)
    out = _HEADING_RE.sub("", out, count=1)
    return out.strip()


def strip_code_fences(text: str | None) -> str:
    if not text:
        return ""
    out = text.strip()
    out = _FENCE_OPEN_RE.sub("", out, count=1)
    out = _FENCE_CLOSE_RE.sub("", out, count=1)
    return out.strip()


def escape_html(text: str | None) -> str:
    if not text:
        return ""
    return html.escape(text, quote=True)


def text_to_html_block(text: str | None) -> str:
    """プレーンテキストを改行保持の記事ブロックへ変換する。"""

    escaped = escape_html(text).replace("\n", "<br/>")
    return f'<div class="article-body" style="white-space: pre-wrap;">{escaped}</div>'
