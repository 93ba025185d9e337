"""ニュースレター翻訳ユースケース: 受信→翻訳→自分宛てに再送信。"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from googleapiclient.discovery import Resource

from newsletter_translator.clients import bedrock_client, gmail_client
from newsletter_translator.core.logging import log_event
from newsletter_translator.core.models import LetterResult, MailMessage, RunSummary
from newsletter_translator.core.settings import Settings
from newsletter_translator.features.letters_translate import gate_letters_translate as gate
from newsletter_translator.features.letters_translate.strategy_letters_translate import (
    Generate,
    translate_letter,
    translate_subject,
)
from newsletter_translator.shared.mail_body import extract_bodies
from newsletter_translator.shared.mime_codec import build_mime

NO_SUBJECT = "(No Subject)"


def translate_letters(
    *,
    settings: Settings,
    service: Resource | None = None,
) -> RunSummary:
    """
    検索クエリに一致するニュースレターを全ページ処理する。

    ページ内のメッセージはバッチで一括取得し、その後 1 通ずつ順に処理する。
    1 通の失敗は記録して次へ進む。

    Raises:
        ValueError: Google 資格情報が不足している場合
        GmailApiError: 一覧取得・プロフィール取得に失敗した場合
    """

    if service is None:
        service = gmail_client.service_from_settings(settings)
    mailbox = gmail_client.get_profile_email(service)
    generate: Generate = partial(bedrock_client.generate_text, settings=settings)

    summary = RunSummary()
    page_token: str | None = None
    while True:
        ids, page_token = gmail_client.list_message_ids(
            service,
            query=settings.gmail_query,
            max_results=settings.page_size,
            page_token=page_token,
        )
        summary.listed += len(ids)

        if ids:
            resources = {
                str(resource.get("id")): resource
                for resource in gmail_client.get_messages(service, ids)
            }
            # 一覧の順序どおりに 1 通ずつ記録する
            for message_id in ids:
                resource = resources.get(message_id)
                if resource is None:
                    summary.record(_failed_fetch(message_id))
                    continue
                summary.record(
                    _process_resource(
                        resource,
                        settings=settings,
                        service=service,
                        mailbox=mailbox,
                        generate=generate,
                    )
                )

        if not page_token:
            break

    log_event(
        "run_finished",
        listed=summary.listed,
        processed=summary.processed,
        sent=summary.sent,
        skipped=summary.skipped,
        failed=summary.failed,
    )
    return summary


def _process_resource(
    resource: dict[str, Any],
    *,
    settings: Settings,
    service: Resource,
    mailbox: str,
    generate: Generate,
) -> LetterResult:
    message: MailMessage | None = None
    try:
        message = MailMessage.from_api(resource)
        return process_letter(
            message,
            settings=settings,
            service=service,
            mailbox=mailbox,
            generate=generate,
        )
    except Exception as exc:
        message_id = str(resource.get("id", ""))
        log_event(
            "letter_failed",
            level=logging.ERROR,
            message_id=message_id,
            error=str(exc),
        )
        if message is None:
            return _failed_result(message_id, reason="unexpected_error")
        return _result(message, "FAILED", reason="unexpected_error")


def process_letter(
    message: MailMessage,
    *,
    settings: Settings,
    service: Resource,
    mailbox: str,
    generate: Generate,
) -> LetterResult:
    """1 通を判定・翻訳し、条件を満たせば送信する。"""

    if not gate.is_within_window(message.received_at, settings):
        log_event("letter_skipped", message_id=message.id, reason="outside_window")
        return _result(message, "SKIPPED", reason="outside_window")

    body = extract_bodies(message.payload)
    translation = translate_letter(
        body,
        snippet=message.snippet,
        settings=settings,
        generate=generate,
    )
    if not gate.should_dispatch(translation):
        reason = translation.reason or "empty_html"
        log_event(
            "letter_skipped",
            message_id=message.id,
            reason=reason,
            strategy=translation.strategy,
        )
        return _result(message, "SKIPPED", reason=reason)

    subject = translate_subject(message.subject or NO_SUBJECT, generate)
    outgoing = gate.build_outgoing(
        mailbox=mailbox,
        subject=subject,
        result=translation,
        settings=settings,
    )
    try:
        gmail_client.send_raw(service, build_mime(outgoing))
    except gmail_client.GmailApiError as exc:
        log_event(
            "letter_failed",
            level=logging.ERROR,
            message_id=message.id,
            reason="send_failed",
            error=str(exc),
        )
        return _result(message, "FAILED", reason="send_failed", translated=translation.text)

    log_event(
        "letter_sent",
        message_id=message.id,
        strategy=translation.strategy,
        subject=outgoing.subject,
    )
    return _result(message, "SENT", translated=translation.text)


def _result(
    message: MailMessage,
    status: str,
    *,
    reason: str | None = None,
    translated: str = "",
) -> LetterResult:
    return LetterResult(
        id=message.id,
        thread_id=message.thread_id,
        subject=message.subject or NO_SUBJECT,
        from_addr=message.from_addr,
        date=message.date,
        status=status,  # type: ignore[arg-type]
        reason=reason,
        translated=translated,
    )


def _failed_fetch(message_id: str) -> LetterResult:
    return _failed_result(message_id, reason="fetch_failed")


def _failed_result(message_id: str, *, reason: str) -> LetterResult:
    return LetterResult(
        id=message_id,
        thread_id=None,
        subject="",
        from_addr="",
        date="",
        status="FAILED",
        reason=reason,
    )
