"""Gmail API 向けの base64url / MIME エンコード処理。"""

from __future__ import annotations

import base64
import binascii
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from newsletter_translator.core.models import OutgoingMessage


def decode_base64url(data: str | None) -> str:
    """base64url 文字列を UTF-8 テキストへ戻す。不正な入力は空文字を返す。"""

    if not data:
        return ""
    padded = data + "=" * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return ""


def encode_base64url(text: str) -> str:
    """UTF-8 テキストをパディング無しの base64url に変換する。"""

    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def encode_rfc2047(subject: str | None) -> str:
    """件名を `=?UTF-8?B?...?=` 形式へエンコードする。"""

    if not subject:
        return ""
    encoded = base64.b64encode(subject.encode("utf-8")).decode("ascii")
    return f"=?UTF-8?B?{encoded}?="


def build_mime(message: OutgoingMessage) -> str:
    """
    送信用の RAW MIME を組み立て、Gmail の `raw` フィールド形式で返す。

    HTML 本文がある場合は text/plain と text/html の multipart/alternative、
    無い場合は text/plain の単一パートになる。各パートは UTF-8 / base64。
    """

    if message.body_html:
        mime: MIMEMultipart | MIMEText = MIMEMultipart("alternative")
        mime.attach(MIMEText(message.body_text or "", "plain", "utf-8"))
        mime.attach(MIMEText(message.body_html, "html", "utf-8"))
    else:
        mime = MIMEText(message.body_text or "", "plain", "utf-8")

    mime["To"] = message.to
    mime["From"] = message.from_addr
    mime["Subject"] = encode_rfc2047(message.subject)

    return base64.urlsafe_b64encode(mime.as_bytes()).decode("ascii").rstrip("=")
