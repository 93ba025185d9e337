"""Gmail API SDK を扱うヘルパー。"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError

from newsletter_translator.core.logging import log_event
from newsletter_translator.core.settings import Settings

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
GMAIL_MODIFY_SCOPE = "https://www.googleapis.com/auth/gmail.modify"
GMAIL_USER_ID = "me"


class GmailApiError(RuntimeError):
    """Gmail API のエラーを表す例外。"""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_credentials(
    *,
    client_id: str,
    client_secret: str,
    refresh_token: str,
    scopes: Sequence[str] | None = None,
) -> Credentials:
    """Refresh Token を利用して Google API 認証情報を構築する。"""

    scopes = list(scopes or [GMAIL_MODIFY_SCOPE])
    return Credentials(
        token=None,
        refresh_token=refresh_token,
        client_id=client_id,
        client_secret=client_secret,
        token_uri=GOOGLE_TOKEN_URI,
        scopes=scopes,
    )


def build_gmail_service(*, credentials: Credentials) -> Resource:
    """google-api-python-client の Gmail Service を生成する。"""

    return build("gmail", "v1", credentials=credentials, cache_discovery=False)


def service_from_settings(settings: Settings) -> Resource:
    """Settings から必要情報を取り出して Gmail Service を生成する。"""

    if not (
        settings.google_client_id
        and settings.google_client_secret
        and settings.google_refresh_token
    ):
        raise ValueError("Google API 用のクライアント資格情報が不足しています。")

    credentials = build_credentials(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        refresh_token=settings.google_refresh_token,
    )
    return build_gmail_service(credentials=credentials)


def get_profile_email(service: Resource) -> str:
    """認証ユーザー自身のメールアドレスを返す。"""

    try:
        profile = service.users().getProfile(userId=GMAIL_USER_ID).execute()
    except HttpError as exc:
        raise _wrap_http_error("プロフィール取得", exc) from exc
    return profile["emailAddress"]


def list_message_ids(
    service: Resource,
    *,
    query: str,
    max_results: int,
    page_token: str | None = None,
) -> tuple[list[str], str | None]:
    """検索クエリに一致するメッセージ ID の 1 ページ分と次ページトークンを返す。"""

    try:
        response = (
            service.users()
            .messages()
            .list(
                userId=GMAIL_USER_ID,
                q=query,
                maxResults=max_results,
                pageToken=page_token,
            )
            .execute()
        )
    except HttpError as exc:
        raise _wrap_http_error("メッセージ一覧取得", exc) from exc

    ids = [item["id"] for item in response.get("messages") or []]
    return ids, response.get("nextPageToken")


def get_messages(service: Resource, message_ids: Sequence[str]) -> list[dict[str, Any]]:
    """
    メッセージ本体を 1 回のバッチリクエストでまとめて取得する。

    取得に失敗した ID はログに残して結果から除外する。戻り値は ID の並び順。
    """

    if not message_ids:
        return []

    fetched: dict[str, dict[str, Any]] = {}

    def _on_response(request_id: str, response: Any, exception: Exception | None) -> None:
        if exception is not None:
            log_event(
                "message_fetch_failed",
                level=logging.ERROR,
                message_id=request_id,
                error=str(exception),
            )
            return
        fetched[request_id] = response

    batch = service.new_batch_http_request(callback=_on_response)
    for message_id in message_ids:
        batch.add(
            service.users().messages().get(
                userId=GMAIL_USER_ID, id=message_id, format="full"
            ),
            request_id=message_id,
        )
    try:
        batch.execute()
    except HttpError as exc:
        raise _wrap_http_error("メッセージ取得", exc) from exc

    return [fetched[message_id] for message_id in message_ids if message_id in fetched]


def send_raw(service: Resource, raw: str) -> dict[str, Any]:
    """base64url の RAW MIME を送信する。"""

    try:
        return (
            service.users()
            .messages()
            .send(userId=GMAIL_USER_ID, body={"raw": raw})
            .execute()
        )
    except HttpError as exc:
        raise _wrap_http_error("メール送信", exc) from exc


def _wrap_http_error(action: str, exc: HttpError) -> GmailApiError:
    status = getattr(exc.resp, "status", None)
    return GmailApiError(f"Gmail API {action}に失敗しました (Status: {status})", status)
