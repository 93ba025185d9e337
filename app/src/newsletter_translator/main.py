"""ローカル/ Lambda エントリポイント。"""

from __future__ import annotations

import json
import os
from dataclasses import asdict
from typing import Any

import uvicorn
from dotenv import load_dotenv
from mangum import Mangum

from .app import create_app
from .core.logging import configure_logging
from .core.settings import load_settings
from .features.letters_translate.usecase_letters_translate import translate_letters

app = create_app()
_handler = Mangum(app)

_SCHEDULED_EVENT_SOURCE = "aws.events"


def lambda_handler(event: dict[str, Any], context: Any) -> Any:
    """AWS Lambda から呼び出されるエントリポイント

    EventBridge のスケジュール起動はパイプラインを直接 1 回実行し、
    それ以外の HTTP イベントは Mangum 経由で FastAPI に渡す。
    """
    if event.get("source") == _SCHEDULED_EVENT_SOURCE:
        summary = translate_letters(settings=load_settings())
        return asdict(summary)
    return _handler(event, context)


def run_local() -> None:
    """`newsletter-translator-api` 用のローカル実行関数。"""
    load_dotenv()
    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8000"))
    uvicorn.run("newsletter_translator.main:app", host=host, port=port, reload=True)


def run_once() -> None:
    """`newsletter-translate` 用: `.env` を読み込んで 1 回だけ処理して終了する。"""
    load_dotenv()
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    load_settings.cache_clear()
    summary = translate_letters(settings=load_settings())
    print(json.dumps(asdict(summary), ensure_ascii=False, indent=2))


if os.getenv("RUN_LOCAL") == "1":
    run_local()
