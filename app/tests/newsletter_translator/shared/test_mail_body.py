"""MIME 本文抽出とメールモデル変換のテスト。"""

from __future__ import annotations

from newsletter_translator.core.models import MailMessage, pick_header
from newsletter_translator.shared.mail_body import extract_bodies
from newsletter_translator.shared.mime_codec import encode_base64url


def test_単一パートのHTMLはMIMEタイプで判定する() -> None:
    payload = {
        "mimeType": "TEXT/HTML; charset=utf-8",
        "body": {"data": encode_base64url("<p>뉴닉</p>")},
    }

    extracted = extract_bodies(payload)

    assert extracted.text_html == "<p>뉴닉</p>"
    assert extracted.text_plain == ""


def test_タイプの無い単一パートはプレーンテキスト() -> None:
    payload = {"body": {"data": encode_base64url("본문")}, "parts": []}

    extracted = extract_bodies(payload)

    assert extracted.text_plain == "본문"
    assert extracted.text_html == ""


def test_入れ子のパートを連結する() -> None:
    payload = {
        "mimeType": "multipart/mixed",
        "body": {"size": 0},
        "parts": [
            {
                "mimeType": "multipart/alternative",
                "body": {"size": 0},
                "parts": [
                    {"mimeType": "text/plain", "body": {"data": encode_base64url("one ")}},
                    {"mimeType": "text/html", "body": {"data": encode_base64url("<p>1</p>")}},
                ],
            },
            {"mimeType": "text/plain", "body": {"data": encode_base64url("two")}},
            {"mimeType": "image/png", "body": {"attachmentId": "att-1"}},
            {"mimeType": "text/html", "body": {}},
        ],
    }

    extracted = extract_bodies(payload)

    assert extracted.text_plain == "one two"
    assert extracted.text_html == "<p>1</p>"


def test_空のペイロード() -> None:
    extracted = extract_bodies(None)

    assert extracted.text_plain == ""
    assert extracted.text_html == ""


def test_APIリソースからメールを組み立てる() -> None:
    resource = {
        "id": "m1",
        "threadId": "t1",
        "snippet": "오늘의 뉴스",
        "internalDate": "1736116200000",
        "payload": {
            "headers": [
                {"name": "From", "value": "NEWNEEK <whatsup@newneek.co>"},
                {"name": "Subject", "value": "🦔 오늘의 뉴닉"},
                {"name": "Date", "value": "Mon, 6 Jan 2025 07:30:00 +0900"},
            ],
        },
    }

    message = MailMessage.from_api(resource)

    assert message.id == "m1"
    assert message.thread_id == "t1"
    assert message.from_addr == "NEWNEEK <whatsup@newneek.co>"
    assert message.subject == "🦔 오늘의 뉴닉"
    assert message.received_at is not None
    assert int(message.received_at.timestamp() * 1000) == 1736116200000


def test_internalDateが無ければDateヘッダを使う() -> None:
    resource = {
        "id": "m2",
        "payload": {"headers": [{"name": "Date", "value": "Mon, 6 Jan 2025 07:30:00 +0900"}]},
    }

    message = MailMessage.from_api(resource)

    assert message.received_at is not None
    assert message.received_at.utcoffset().total_seconds() == 9 * 3600


def test_ヘッダ名は完全一致で探す() -> None:
    headers = [{"name": "subject", "value": "lower"}, {"name": "Subject", "value": "Upper"}]

    assert pick_header(headers, "Subject") == "Upper"
    assert pick_header(headers, "From") == ""


def test_範囲外のinternalDateは受信時刻なしとする() -> None:
    message = MailMessage.from_api({"id": "m3", "internalDate": "9" * 25})

    assert message.id == "m3"
    assert message.received_at is None
