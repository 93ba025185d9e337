"""newsletter_translator パッケージ。"""

from .app import create_app
from .main import app, lambda_handler, run_local, run_once

__all__ = ["create_app", "app", "lambda_handler", "run_local", "run_once"]
