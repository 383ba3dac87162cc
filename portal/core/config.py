import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class RemoteSettings(BaseModel):
    api_url: str = Field(default=os.getenv("GITHUB_API_URL", "https://api.github.com"))
    accept_header: str = "application/vnd.github.v3+json"
    gist_filename: str = Field(default=os.getenv("PORTAL_GIST_FILENAME", "leadership-portal-data.json"))
    gist_description: str = Field(default=os.getenv("PORTAL_GIST_DESCRIPTION", "Leadership Portal Data"))
    timeout_seconds: float = Field(default=float(os.getenv("REMOTE_TIMEOUT_SECONDS", "30")))

class Config(BaseModel):
    app_name: str = "Leadership Portal Data Service"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Persistent key-value area for credentials
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./portal.db")

    # Remote document store
    remote: RemoteSettings = RemoteSettings()

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # CORS — comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000,"
                "http://localhost:8080,http://127.0.0.1:8080",
            ).split(",")
            if o.strip()
        ]
    )

settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment != "development" and settings.database_url.endswith(":memory:"):
    _logger.warning("⚠ In-memory DATABASE_URL outside development; credentials will not survive a restart.")
