"""Gmail の MIME ペイロードから本文を取り出す。"""

from __future__ import annotations

from typing import Any

from newsletter_translator.core.models import ExtractedBody
from newsletter_translator.shared.mime_codec import decode_base64url


def extract_bodies(payload: dict[str, Any] | None) -> ExtractedBody:
    """
    ペイロードのツリーを走査して text/plain と text/html の本文を集める。

    トップレベルに `parts` が無く `body.data` だけがある場合は、宣言された
    mimeType に従って直接デコードする。
    """

    extracted = ExtractedBody()
    if not payload:
        return extracted

    data = (payload.get("body") or {}).get("data")
    if data and not payload.get("parts"):
        decoded = decode_base64url(data)
        if "text/html" in (payload.get("mimeType") or "").lower():
            extracted.text_html = decoded
        else:
            extracted.text_plain = decoded
        return extracted

    _walk(payload, extracted)
    return extracted


def _walk(part: dict[str, Any] | None, extracted: ExtractedBody) -> None:
    if not part:
        return
    mime_type = part.get("mimeType")
    data = (part.get("body") or {}).get("data")
    if mime_type == "text/plain" and data:
        extracted.text_plain += decode_base64url(data)
    elif mime_type == "text/html" and data:
        extracted.text_html += decode_base64url(data)
    for child in part.get("parts") or []:
        _walk(child, extracted)
