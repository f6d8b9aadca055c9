# backend/config.py

import logging
import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


class Settings:
    """Application settings loaded from environment variables.

    The store service, the relay and the client adapters all read from here.
    """

    def __init__(self):
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./chat_app.db")
        self.jwt_secret: str = os.getenv("JWT_SECRET", "change_this_to_a_random_string")
        self.store_public_key: str = os.getenv("STORE_PUBLIC_KEY", "")
        self.cors_origins: List[str] = [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
            ).split(",")
            if o.strip()
        ]

        self.store_url: str = os.getenv("STORE_URL", "http://localhost:8000").rstrip("/")
        # The relay runs as its own app, on its own port
        self.relay_port: int = int(os.getenv("RELAY_PORT", "8001"))
        self.relay_url: str = os.getenv(
            "RELAY_URL", f"http://localhost:{self.relay_port}/functions/v1/chat"
        )

        # Presence is checked per request by the relay, not at startup
        self.ai_gateway_api_key: Optional[str] = os.getenv("AI_GATEWAY_API_KEY")
        self.ai_gateway_url: str = os.getenv(
            "AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions"
        )
        self.ai_gateway_model: str = os.getenv("AI_GATEWAY_MODEL", "google/gemini-2.5-flash")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging():
    """Root logging for the store and relay entry points; both share one format."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
