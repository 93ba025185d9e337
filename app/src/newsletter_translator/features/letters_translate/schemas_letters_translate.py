"""`/letters/translate` のレスポンススキーマ。"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LetterResultModel(BaseModel):
    """1 通ごとの処理結果。"""

    id: str
    thread_id: str | None = None
    subject: str
    from_addr: str
    date: str
    status: Literal["SENT", "SKIPPED", "FAILED"]
    reason: str | None = None
    translated: str = ""

    model_config = ConfigDict(extra="forbid")


class LettersTranslateResponse(BaseModel):
    """実行サマリ。"""

    listed: int
    processed: int
    sent: int
    skipped: int
    failed: int
    results: list[LetterResultModel] = Field(default_factory=list)
