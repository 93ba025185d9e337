from __future__ import annotations

import os
from typing import Any, Callable

os.environ.setdefault("APP_ENV", "local")

import pytest

from newsletter_translator.core import settings as core_settings
from newsletter_translator.core.settings import Settings

_ENV_KEYS = (
    "APP_ENV",
    "API_KEY",
    "BEDROCK_MODEL_ID",
    "GMAIL_QUERY",
    "GMAIL_PAGE_SIZE",
    "HTML_STRATEGY",
    "SUBJECT_TAG",
    "WINDOW_START_HOUR",
    "WINDOW_END_HOUR",
)


@pytest.fixture(autouse=True)
def basic_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """アプリ初期化に必要な環境変数をテスト時にセットする。"""

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("GOOGLE_OAUTH_CLIENT_ID", "client-id")
    monkeypatch.setenv("GOOGLE_OAUTH_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("GOOGLE_REFRESH_TOKEN", "refresh-token")
    core_settings.load_settings.cache_clear()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """テスト用の Settings を組み立てる。"""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "app_env": "local",
            "region": "ap-northeast-2",
            "timezone_default": "Asia/Seoul",
            "google_client_id": "client-id",
            "google_client_secret": "client-secret",
            "google_refresh_token": "refresh-token",
            "bedrock_model_id": "anthropic.claude-3-5-sonnet-20240620-v1:0",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


class FakeModel:
    """プロンプトの種類ごとに固定の出力を返す生成関数の代役。"""

    def __init__(self, **outputs: Any) -> None:
        self.outputs = outputs
        self.calls: list[tuple[str, str]] = []

    def __call__(
        self,
        prompt: str,
        *,
        response_format: str = "text/plain",
        temperature: float = 0.3,
        **_: Any,
    ) -> str:
        kind = _prompt_kind(prompt)
        self.calls.append((kind, response_format))
        out = self.outputs.get(kind, "")
        if isinstance(out, Exception):
            raise out
        if callable(out):
            return out(prompt)
        return out

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.calls]


def _prompt_kind(prompt: str) -> str:
    if "COMPLETE document" in prompt:
        return "end_to_end"
    if "native English teacher" in prompt:
        return "teaching"
    if "Preserve ALL HTML tags" in prompt:
        return "html"
    return "plain"


@pytest.fixture
def fake_model() -> type[FakeModel]:
    return FakeModel
