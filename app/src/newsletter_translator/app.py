"""FastAPI アプリケーションの組み立てを担当するモジュール。"""

from __future__ import annotations

from fastapi import FastAPI

from .core.middleware import api_key_middleware, request_id_middleware
from .core.settings import load_settings
from .features.letters_translate.router_letters_translate import router as letters_router


def create_app() -> FastAPI:
    """コア設定や共通ミドルウェアを組み込んだ FastAPI アプリを返す。"""

    settings = load_settings()
    app = FastAPI(title="newsletter-translator", version="0.1.0")
    app.state.settings = settings  # type: ignore[attr-defined]
    # 後から登録したものが外側になる: request_id → api_key の順に通す
    app.middleware("http")(api_key_middleware)
    app.middleware("http")(request_id_middleware)

    @app.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        return {"status": "ok", "env": settings.app_env}

    app.include_router(letters_router)

    return app
