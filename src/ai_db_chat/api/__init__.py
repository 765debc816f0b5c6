"""HTTP surface for ai-db-chat."""

from ai_db_chat.api.app import create_app

__all__ = ["create_app"]
