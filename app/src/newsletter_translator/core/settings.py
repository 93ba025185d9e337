"""アプリ全体で共有する設定読み込みロジック。"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Literal

import boto3
from botocore.exceptions import ClientError


_DEFAULT_REGION = "ap-northeast-2"
_DEFAULT_TZ = "Asia/Seoul"
_LOCAL_ENV = "local"
_DEFAULT_QUERY = 'from:newneek.co subject:"🦔" newer_than:1d'
_DEFAULT_SUBJECT_TAG = "[NEWNEEK-EN]"
_HTML_STRATEGIES = ("end_to_end", "stitched")
# Gmail のバッチリクエストは 1 回 100 件まで
_MAX_PAGE_SIZE = 100

HtmlStrategy = Literal["end_to_end", "stitched"]


@dataclass(slots=True)
class Settings:
    """環境非依存で参照できる設定値の集合。"""

    app_env: str
    region: str
    timezone_default: str
    google_client_id: str | None
    google_client_secret: str | None
    google_refresh_token: str | None
    bedrock_model_id: str | None
    gmail_query: str = _DEFAULT_QUERY
    page_size: int = 20
    subject_tag: str = _DEFAULT_SUBJECT_TAG
    window_start_hour: int = 6
    window_end_hour: int = 10
    html_strategy: HtmlStrategy = "end_to_end"
    api_key: str | None = None
    ssm_path_prefix: str | None = None

    @property
    def is_local(self) -> bool:
        return self.app_env == _LOCAL_ENV

    @property
    def translation_enabled(self) -> bool:
        """翻訳 API の資格情報が揃っているか。"""

        return bool(self.bedrock_model_id)


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"環境変数 {name} は整数である必要があります。") from exc


def _validate_hours(start: int, end: int) -> None:
    if not (0 <= start < end <= 24):
        raise ValueError(f"配信時間帯の指定が不正です: {start}-{end}")


def _validate_page_size(page_size: int) -> int:
    if not (1 <= page_size <= _MAX_PAGE_SIZE):
        raise ValueError(f"GMAIL_PAGE_SIZE は 1-{_MAX_PAGE_SIZE} の範囲で指定してください: {page_size}")
    return page_size


def _validate_strategy(raw: str) -> HtmlStrategy:
    if raw not in _HTML_STRATEGIES:
        raise ValueError(f"HTML_STRATEGY は {', '.join(_HTML_STRATEGIES)} のいずれかです。")
    return raw  # type: ignore[return-value]


def _fetch_ssm_parameters(
    region: str, names: Iterable[str], prefix: str
) -> dict[str, str]:
    name_list = [f"{prefix}/{name}" for name in names]
    client = boto3.client("ssm", region_name=region)
    try:
        resp = client.get_parameters(Names=name_list, WithDecryption=True)
    except ClientError as exc:  # pragma: no cover - boto3 例外ラップ
        raise RuntimeError("SSM パラメータ取得に失敗しました。") from exc

    found = {item["Name"]: item["Value"] for item in resp.get("Parameters", [])}
    missing = {name for name in name_list if name not in found}
    if missing:
        raise ValueError(f"SSM パラメータ未設定: {', '.join(sorted(missing))}")
    return found


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """環境に応じて環境変数または SSM から設定を構築する。"""

    app_env = os.getenv("APP_ENV", _LOCAL_ENV)
    region = os.getenv("REGION", _DEFAULT_REGION)
    # 配信時間帯の判定はソウル時間固定で運用する。
    timezone_default = _DEFAULT_TZ

    window_start_hour = _get_int_env("WINDOW_START_HOUR", 6)
    window_end_hour = _get_int_env("WINDOW_END_HOUR", 10)
    _validate_hours(window_start_hour, window_end_hour)

    common = dict(
        gmail_query=os.getenv("GMAIL_QUERY") or _DEFAULT_QUERY,
        page_size=_validate_page_size(_get_int_env("GMAIL_PAGE_SIZE", 20)),
        subject_tag=os.getenv("SUBJECT_TAG") or _DEFAULT_SUBJECT_TAG,
        window_start_hour=window_start_hour,
        window_end_hour=window_end_hour,
        html_strategy=_validate_strategy(os.getenv("HTML_STRATEGY") or "end_to_end"),
    )

    if app_env == _LOCAL_ENV:
        return Settings(
            app_env=app_env,
            region=region,
            timezone_default=timezone_default,
            google_client_id=os.getenv("GOOGLE_OAUTH_CLIENT_ID"),
            google_client_secret=os.getenv("GOOGLE_OAUTH_CLIENT_SECRET"),
            google_refresh_token=os.getenv("GOOGLE_REFRESH_TOKEN"),
            bedrock_model_id=os.getenv("BEDROCK_MODEL_ID"),
            api_key=os.getenv("API_KEY"),
            ssm_path_prefix=None,
            **common,
        )

    prefix = os.getenv("SSM_PATH_PREFIX", "/newsletter-translator/prod")
    required_keys = [
        "google/oauth_client_id",
        "google/oauth_client_secret",
        "google/refresh_token",
        "bedrock/model_id",
        "api_key",
    ]
    values = _fetch_ssm_parameters(region=region, names=required_keys, prefix=prefix)

    def from_ssm(key: str) -> str:
        return values[f"{prefix}/{key}"]

    return Settings(
        app_env=app_env,
        region=region,
        timezone_default=timezone_default,
        google_client_id=from_ssm("google/oauth_client_id"),
        google_client_secret=from_ssm("google/oauth_client_secret"),
        google_refresh_token=from_ssm("google/refresh_token"),
        bedrock_model_id=from_ssm("bedrock/model_id"),
        api_key=from_ssm("api_key"),
        ssm_path_prefix=prefix,
        **common,
    )
