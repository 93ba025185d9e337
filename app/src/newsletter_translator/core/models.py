"""ユースケース間で共有するデータモデル。"""

from __future__ import annotations

import email.utils
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

LetterStatus = Literal["SENT", "SKIPPED", "FAILED"]


def pick_header(headers: list[dict[str, str]], name: str) -> str:
    """Gmail のヘッダ配列から名前が完全一致する最初の値を返す。"""

    for header in headers:
        if header.get("name") == name:
            return header.get("value") or ""
    return ""


@dataclass(slots=True)
class MailMessage:
    """Gmail API `users.messages.get(format=full)` から取り出したメール。"""

    id: str
    thread_id: str | None
    from_addr: str
    subject: str
    date: str
    snippet: str
    payload: dict[str, Any]
    received_at: datetime | None

    @classmethod
    def from_api(cls, resource: dict[str, Any]) -> "MailMessage":
        payload = resource.get("payload") or {}
        headers = payload.get("headers") or []
        date = pick_header(headers, "Date")
        return cls(
            id=str(resource.get("id", "")),
            thread_id=resource.get("threadId"),
            from_addr=pick_header(headers, "From"),
            subject=pick_header(headers, "Subject"),
            date=date,
            snippet=resource.get("snippet") or "",
            payload=payload,
            received_at=_resolve_received_at(resource.get("internalDate"), date),
        )


def _resolve_received_at(internal_date: Any, date_header: str) -> datetime | None:
    # internalDate (epoch ms) を優先し、無ければ Date ヘッダを使う。
    if internal_date not in (None, ""):
        try:
            return datetime.fromtimestamp(int(internal_date) / 1000, tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            pass
    if date_header:
        try:
            return email.utils.parsedate_to_datetime(date_header)
        except (TypeError, ValueError):
            return None
    return None


@dataclass(slots=True)
class ExtractedBody:
    """MIME ツリーから取り出したプレーンテキスト/HTML 本文。"""

    text_plain: str = ""
    text_html: str = ""


@dataclass(slots=True)
class TranslationResult:
    """翻訳戦略の結果。`ok` が False の場合は送信しない。"""

    html: str = ""
    text: str = ""
    ok: bool = False
    reason: str | None = None
    strategy: str | None = None

    @classmethod
    def rejected(cls, reason: str, *, strategy: str | None = None) -> "TranslationResult":
        return cls(ok=False, reason=reason, strategy=strategy)


@dataclass(slots=True)
class OutgoingMessage:
    """送信するメール。`build_mime` で RAW MIME に変換される。"""

    to: str
    from_addr: str
    subject: str
    body_text: str
    body_html: str | None = None


@dataclass(slots=True)
class LetterResult:
    """1 通ごとの処理結果。"""

    id: str
    thread_id: str | None
    subject: str
    from_addr: str
    date: str
    status: LetterStatus
    reason: str | None = None
    translated: str = ""


@dataclass(slots=True)
class RunSummary:
    """1 回の実行で集計するカウンタと結果一覧。"""

    listed: int = 0
    processed: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    results: list[LetterResult] = field(default_factory=list)

    def record(self, result: LetterResult) -> None:
        self.processed += 1
        if result.status == "SENT":
            self.sent += 1
        elif result.status == "SKIPPED":
            self.skipped += 1
        else:
            self.failed += 1
        self.results.append(result)
