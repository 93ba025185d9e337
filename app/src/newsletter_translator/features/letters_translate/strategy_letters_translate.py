"""ニュースレター本文の翻訳戦略。

HTML 本文か、テキストのみか、翻訳用の資格情報があるかで分岐する。
どの戦略でもモデル出力はハングル比率などのヒューリスティックで検査し、
不合格なら `TranslationResult.ok == False` を返して送信させない。
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from newsletter_translator.core.logging import log_event
from newsletter_translator.core.models import ExtractedBody, TranslationResult
from newsletter_translator.core.prompts import (
    build_end_to_end_prompt,
    build_html_prompt,
    build_plain_prompt,
    build_teaching_prompt,
)
from newsletter_translator.core.settings import Settings
from newsletter_translator.shared.html_text import (
    clean_model_output,
    extract_head_and_body,
    korean_ratio,
    strip_code_fences,
    strip_html,
    text_to_html_block,
)

PLAIN_MAX_KOREAN_RATIO = 0.3
HTML_MAX_KOREAN_RATIO = 0.3
TEACHING_MAX_KOREAN_RATIO = 0.5
SUBJECT_MAX_KOREAN_RATIO = 0.3
MIN_TRANSLATED_TEXT_LENGTH = 20

_DOCUMENT_RE = re.compile(r"<(html|body)[\s>]", re.IGNORECASE)


class Generate(Protocol):
    def __call__(
        self, prompt: str, *, response_format: str = ..., temperature: float = ...
    ) -> str: ...


def translate_plain(text: str, generate: Generate) -> str:
    """韓国語テキストを英語テキストへ翻訳する。不合格なら空文字。"""

    out = clean_model_output(
        generate(build_plain_prompt(text), response_format="text/plain", temperature=0.3)
    )
    if not out or korean_ratio(out) > PLAIN_MAX_KOREAN_RATIO:
        return ""
    return out


def translate_html(source_html: str, generate: Generate) -> str:
    """タグを保持したまま HTML 本文を翻訳する。不合格なら空文字。"""

    out = strip_code_fences(
        generate(build_html_prompt(source_html), response_format="text/html", temperature=0.3)
    )
    if _looks_untranslated(out, source_html):
        return ""
    return out


def translate_teaching(text: str, generate: Generate) -> str:
    """記事ごとの英訳と語彙・文型セクションを HTML 断片で生成する。"""

    out = strip_code_fences(
        generate(build_teaching_prompt(text), response_format="text/html", temperature=0.4)
    )
    if not out or korean_ratio(out) > TEACHING_MAX_KOREAN_RATIO:
        return ""
    return out


def translate_end_to_end(source_html: str, generate: Generate) -> str:
    """学習セクション付きの完全な英語 HTML 文書を 1 回の呼び出しで生成する。"""

    out = strip_code_fences(
        generate(
            build_end_to_end_prompt(source_html),
            response_format="text/html",
            temperature=0.3,
        )
    )
    if not _DOCUMENT_RE.search(out):
        return ""
    if _looks_untranslated(out, source_html):
        return ""
    return out


def _looks_untranslated(out: str, source_html: str) -> bool:
    if not out:
        return True
    visible = strip_html(out)
    if korean_ratio(visible) > HTML_MAX_KOREAN_RATIO:
        return True
    # 元が韓国語なのに出力が極端に短い場合は翻訳失敗とみなす
    return (
        len(visible) < MIN_TRANSLATED_TEXT_LENGTH
        and korean_ratio(strip_html(source_html)) > HTML_MAX_KOREAN_RATIO
    )


def translate_letter(
    body: ExtractedBody,
    *,
    snippet: str,
    settings: Settings,
    generate: Generate,
) -> TranslationResult:
    """
    抽出済み本文に応じて翻訳戦略を選び、送信用の HTML/テキストを返す。

    Args:
        body: MIME ツリーから取り出した本文
        snippet: text/plain が空の場合に使う Gmail のスニペット
        settings: アプリケーション設定
        generate: プロンプトを受け取り生成テキストを返す関数

    Returns:
        翻訳結果。失敗・不合格の場合は `ok=False` と理由を持つ。
    """

    if not settings.translation_enabled:
        return TranslationResult.rejected("no_credential")

    if body.text_html:
        strategy = settings.html_strategy
    else:
        strategy = "text"

    try:
        if strategy == "end_to_end":
            return _translate_end_to_end(body.text_html, generate)
        if strategy == "stitched":
            return _translate_stitched(body.text_html, generate)
        return _translate_text_only(body.text_plain or snippet, generate)
    except Exception as exc:
        log_event(
            "translation_failed",
            level=logging.WARNING,
            strategy=strategy,
            error=str(exc),
        )
        return TranslationResult.rejected("model_error", strategy=strategy)


def _translate_end_to_end(source_html: str, generate: Generate) -> TranslationResult:
    document = translate_end_to_end(source_html, generate)
    if not document:
        return TranslationResult.rejected("translation_rejected", strategy="end_to_end")
    _, body = extract_head_and_body(document)
    return TranslationResult(
        html=document,
        text=strip_html(body),
        ok=True,
        strategy="end_to_end",
    )


def _translate_stitched(source_html: str, generate: Generate) -> TranslationResult:
    as_text = strip_html(source_html)

    teaching = translate_teaching(as_text, generate)
    if not teaching:
        return TranslationResult.rejected("teaching_rejected", strategy="stitched")

    translated_body = translate_html(source_html, generate)
    if not translated_body:
        plain = translate_plain(as_text, generate)
        if not plain:
            return TranslationResult.rejected("body_rejected", strategy="stitched")
        translated_body = text_to_html_block(plain)

    head1, body1 = extract_head_and_body(teaching)
    head2, body2 = extract_head_and_body(translated_body)
    head = "\n".join(part for part in (head1, head2) if part)
    combined = f"{body1}{body2}"
    return TranslationResult(
        html=f"<html><head>{head}</head><body>{combined}</body></html>",
        text=strip_html(combined),
        ok=True,
        strategy="stitched",
    )


def _translate_text_only(source: str, generate: Generate) -> TranslationResult:
    if not source.strip():
        return TranslationResult.rejected("empty_body", strategy="text")

    teaching = translate_teaching(source, generate)
    plain = translate_plain(source, generate)
    if not teaching and not plain:
        return TranslationResult.rejected("translation_rejected", strategy="text")

    simple = text_to_html_block(plain) if plain else ""
    combined = f"{teaching}{simple}"
    return TranslationResult(
        html=f"<html><body>{combined}</body></html>",
        text=strip_html(combined),
        ok=True,
        strategy="text",
    )


def translate_subject(subject: str, generate: Generate) -> str:
    """件名を英訳する。失敗・不合格なら元の件名を返す。"""

    try:
        translated = translate_plain(subject, generate)
    except Exception as exc:
        log_event("subject_translation_failed", level=logging.WARNING, error=str(exc))
        return subject
    if translated and korean_ratio(translated) < SUBJECT_MAX_KOREAN_RATIO:
        return translated
    return subject
