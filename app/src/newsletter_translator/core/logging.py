"""JSONロギングの共通ヘルパー。"""

from __future__ import annotations

import json
import logging
import traceback
from typing import Any

_LOGGER = logging.getLogger("newsletter_translator")


def configure_logging(level: str | int = "INFO") -> None:
    """CLI 実行用にメッセージのみを出力するハンドラを設定する。"""

    logging.basicConfig(level=level, format="%(message)s")


def log_request(*, path: str, status: int, request_id: str, latency_ms: int) -> None:
    payload = {
        "level": "INFO",
        "path": path,
        "status": status,
        "request_id": request_id,
        "latency_ms": latency_ms,
    }
    _LOGGER.info(json.dumps(payload, ensure_ascii=False))


def log_error(
    *,
    path: str,
    status: int,
    request_id: str,
    latency_ms: int,
    error: Any,
) -> None:
    payload = {
        "level": "ERROR",
        "path": path,
        "status": status,
        "request_id": request_id,
        "latency_ms": latency_ms,
        "error_json": _to_error_json(error),
        "traceback": traceback.format_exc(),
    }
    _LOGGER.error(json.dumps(payload, ensure_ascii=False))


def log_event(event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """パイプライン内のイベントを 1 行 JSON で出力する。"""

    payload: dict[str, Any] = {
        "level": logging.getLevelName(level),
        "event": event,
    }
    payload.update(fields)
    _LOGGER.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def _to_error_json(error: Any) -> str:
    if isinstance(error, (dict, list)):
        return json.dumps(error, ensure_ascii=False)
    return json.dumps({"message": str(error)}, ensure_ascii=False)
