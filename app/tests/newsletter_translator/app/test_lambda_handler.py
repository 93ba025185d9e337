from __future__ import annotations

from unittest.mock import patch

from newsletter_translator import main
from newsletter_translator.core.models import RunSummary


def test_スケジュール起動はパイプラインを直接実行する() -> None:
    with patch.object(main, "translate_letters", return_value=RunSummary(listed=3)) as mock_run:
        result = main.lambda_handler({"source": "aws.events", "detail-type": "Scheduled Event"}, None)

    assert result["listed"] == 3
    assert result["results"] == []
    mock_run.assert_called_once()


def test_HTTPイベントはMangumに渡す() -> None:
    with patch.object(main, "_handler", return_value={"statusCode": 200}) as mock_handler:
        result = main.lambda_handler({"httpMethod": "GET", "path": "/healthz"}, None)

    assert result == {"statusCode": 200}
    mock_handler.assert_called_once()
