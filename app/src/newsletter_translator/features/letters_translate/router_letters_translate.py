"""FastAPI ルータ定義。"""

from __future__ import annotations

import time
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request

from newsletter_translator.core.logging import log_error
from newsletter_translator.core.settings import Settings
from newsletter_translator.features.letters_translate.schemas_letters_translate import (
    LettersTranslateResponse,
)
from newsletter_translator.features.letters_translate.usecase_letters_translate import (
    translate_letters,
)

router = APIRouter(prefix="/letters", tags=["letters"])


def get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


@router.post("/translate", response_model=LettersTranslateResponse)
def letters_translate(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> LettersTranslateResponse:
    """
    受信箱のニュースレターを翻訳して自分宛てに再送信する。

    Raises:
        HTTPException: 設定不備（400）、Gmail API エラー（500）
    """

    try:
        summary = translate_letters(settings=settings)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        started = getattr(request.state, "request_started", time.perf_counter())
        log_error(
            path=request.url.path,
            status=500,
            request_id=getattr(request.state, "request_id", ""),
            latency_ms=int((time.perf_counter() - started) * 1000),
            error=exc,
        )
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return LettersTranslateResponse(**asdict(summary))
