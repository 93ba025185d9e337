"""設定読み込みのテスト。"""

from __future__ import annotations

import pytest

from newsletter_translator.core.settings import load_settings


def test_ローカル環境の既定値を読み込む() -> None:
    settings = load_settings()

    assert settings.is_local
    assert settings.timezone_default == "Asia/Seoul"
    assert settings.gmail_query == 'from:newneek.co subject:"🦔" newer_than:1d'
    assert settings.page_size == 20
    assert settings.subject_tag == "[NEWNEEK-EN]"
    assert (settings.window_start_hour, settings.window_end_hour) == (6, 10)
    assert settings.html_strategy == "end_to_end"
    assert settings.google_refresh_token == "refresh-token"
    assert not settings.translation_enabled


def test_モデルIDがあれば翻訳が有効になる(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BEDROCK_MODEL_ID", "model-id")
    monkeypatch.setenv("HTML_STRATEGY", "stitched")
    monkeypatch.setenv("WINDOW_START_HOUR", "5")
    monkeypatch.setenv("WINDOW_END_HOUR", "8")
    monkeypatch.setenv("GMAIL_PAGE_SIZE", "100")

    settings = load_settings()

    assert settings.translation_enabled
    assert settings.html_strategy == "stitched"
    assert (settings.window_start_hour, settings.window_end_hour) == (5, 8)
    assert settings.page_size == 100


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("HTML_STRATEGY", "pipeline"),
        ("WINDOW_START_HOUR", "11"),
        ("WINDOW_END_HOUR", "25"),
        ("GMAIL_PAGE_SIZE", "twenty"),
        ("GMAIL_PAGE_SIZE", "0"),
        ("GMAIL_PAGE_SIZE", "-5"),
        ("GMAIL_PAGE_SIZE", "101"),
    ],
)
def test_不正な設定値はエラー(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        load_settings()
