"""送信可否の判定と送信メールの組み立て。"""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from newsletter_translator.core.models import OutgoingMessage, TranslationResult
from newsletter_translator.core.settings import Settings


def is_within_window(received_at: datetime | None, settings: Settings) -> bool:
    """受信時刻が設定タイムゾーンの朝の配信時間帯に入っているか。"""

    if received_at is None:
        return False
    if received_at.tzinfo is None:
        received_at = received_at.replace(tzinfo=timezone.utc)
    local = received_at.astimezone(ZoneInfo(settings.timezone_default))
    return settings.window_start_hour <= local.hour < settings.window_end_hour


def should_dispatch(result: TranslationResult) -> bool:
    return result.ok and bool(result.html.strip())


def build_outgoing(
    *,
    mailbox: str,
    subject: str,
    result: TranslationResult,
    settings: Settings,
) -> OutgoingMessage:
    """自分宛てに送り返す翻訳メールを組み立てる。"""

    return OutgoingMessage(
        to=mailbox,
        from_addr=mailbox,
        subject=f"{settings.subject_tag} {subject}",
        body_text=result.text,
        body_html=result.html,
    )
