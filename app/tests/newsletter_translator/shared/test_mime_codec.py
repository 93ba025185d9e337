"""MIME エンコード/デコードのテスト。"""

from __future__ import annotations

import base64
import email
from email.header import decode_header, make_header

import pytest

from newsletter_translator.core.models import OutgoingMessage
from newsletter_translator.shared.mime_codec import (
    build_mime,
    decode_base64url,
    encode_base64url,
    encode_rfc2047,
)


def _parse_raw(raw: str) -> email.message.Message:
    padded = raw + "=" * (-len(raw) % 4)
    return email.message_from_bytes(base64.urlsafe_b64decode(padded))


@pytest.mark.parametrize(
    "text",
    ["hello", "오늘의 뉴닉 🦔", "line1\nline2\r\n", "??>>~~ /+ 끝"],
)
def test_base64urlは往復で元に戻る(text: str) -> None:
    encoded = encode_base64url(text)

    assert "+" not in encoded
    assert "/" not in encoded
    assert not encoded.endswith("=")
    assert decode_base64url(encoded) == text


def test_不正な入力は空文字になる() -> None:
    assert decode_base64url(None) == ""
    assert decode_base64url("") == ""
    assert decode_base64url("a") == ""
    # UTF-8 として解釈できないバイト列
    assert decode_base64url(base64.urlsafe_b64encode(b"\xff\xfe").decode()) == ""


def test_rfc2047で件名をエンコードする() -> None:
    encoded = encode_rfc2047("[NEWNEEK-EN] 뉴닉")

    assert encoded.startswith("=?UTF-8?B?")
    assert encoded.endswith("?=")
    assert str(make_header(decode_header(encoded))) == "[NEWNEEK-EN] 뉴닉"
    assert encode_rfc2047("") == ""


def test_HTMLありはmultipart_alternativeになる() -> None:
    raw = build_mime(
        OutgoingMessage(
            to="me@example.com",
            from_addr="me@example.com",
            subject="[NEWNEEK-EN] Today",
            body_text="Hello",
            body_html="<html><body><p>Hello</p></body></html>",
        )
    )

    message = _parse_raw(raw)
    assert message["MIME-Version"] == "1.0"
    assert message["To"] == "me@example.com"
    assert message["From"] == "me@example.com"
    assert str(make_header(decode_header(message["Subject"]))) == "[NEWNEEK-EN] Today"
    assert message.get_content_type() == "multipart/alternative"

    parts = message.get_payload()
    assert [part.get_content_type() for part in parts] == ["text/plain", "text/html"]
    for part in parts:
        assert part["Content-Transfer-Encoding"] == "base64"
        assert part.get_content_charset() == "utf-8"
    assert parts[0].get_payload(decode=True).decode("utf-8") == "Hello"
    assert "<p>Hello</p>" in parts[1].get_payload(decode=True).decode("utf-8")


def test_HTMLなしはtext_plain単一パートになる() -> None:
    raw = build_mime(
        OutgoingMessage(
            to="me@example.com",
            from_addr="me@example.com",
            subject="제목",
            body_text="본문",
        )
    )

    message = _parse_raw(raw)
    assert not message.is_multipart()
    assert message.get_content_type() == "text/plain"
    assert message["Content-Transfer-Encoding"] == "base64"
    assert message.get_payload(decode=True).decode("utf-8") == "본문"
    assert str(make_header(decode_header(message["Subject"]))) == "제목"
