"""Amazon Bedrock の Chat モデルへのアクセスラッパー。"""

from __future__ import annotations

from functools import lru_cache

import boto3
from botocore.client import BaseClient
from langchain_aws import ChatBedrock
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.output_parsers import StrOutputParser

from newsletter_translator.core.settings import Settings

DEFAULT_MAX_TOKENS = 8192


@lru_cache(maxsize=None)
def get_client(region: str) -> BaseClient:
    """リージョンごとの Bedrock Runtime クライアントを返す。"""

    return boto3.client("bedrock-runtime", region_name=region)


def generate_text(
    prompt: str,
    *,
    settings: Settings,
    response_format: str = "text/plain",
    temperature: float = 0.3,
) -> str:
    """
    プロンプトを 1 回だけ送信して生成テキストを返す。

    Args:
        prompt: ユーザーメッセージとして渡すプロンプト
        settings: アプリケーション設定
        response_format: 期待する出力形式 (`text/plain` / `text/html`)
        temperature: サンプリング温度

    Returns:
        モデルが生成したテキスト（前後の空白のみ除去）

    Raises:
        ValueError: モデル ID が未設定の場合
    """

    if not settings.bedrock_model_id:
        raise ValueError("Bedrock モデルID が設定されていません")

    chat = ChatBedrock(
        model=settings.bedrock_model_id,
        client=get_client(settings.region),
        model_kwargs={"max_tokens": DEFAULT_MAX_TOKENS, "temperature": temperature},
    )
    chain = chat | StrOutputParser()

    messages = [
        SystemMessage(content=f"Respond with {response_format} content only."),
        HumanMessage(content=prompt),
    ]
    return (chain.invoke(messages) or "").strip()
