"""
Sanitizer configuration from environment variables.
Value-safe: no submitted data in defaults or logs.
"""
import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


# Schemes accepted by the url rule when the value carries one
DEFAULT_URL_PROTOCOLS = [
    "http",
    "https",
    "ftp",
    "ftps",
    "mailto",
    "news",
    "irc",
    "irc6",
    "ircs",
    "gopher",
    "nntp",
    "feed",
    "telnet",
    "mms",
    "rtsp",
    "sms",
    "svn",
    "tel",
    "fax",
    "xmpp",
    "webcal",
    "urn",
]


class Settings(BaseSettings):
    """Sanitizer settings loaded from environment variables."""

    service_env: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        description="Environment; 'dev' enables debug logging"
    )

    allowed_url_protocols: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_URL_PROTOCOLS),
        description="URL schemes kept by the url rule (JSON list or comma-separated)"
    )

    strict_sanitize_types: bool = Field(
        default=False,
        description=(
            "Unknown sanitize-type tags: "
            "False = fall back to the text rule, "
            "True = raise UnknownSanitizeTypeError"
        )
    )

    @field_validator("allowed_url_protocols", mode="before")
    @classmethod
    def parse_protocols(cls, v):
        """Accept a JSON array or a comma-separated string from the environment."""
        if v is None:
            return list(DEFAULT_URL_PROTOCOLS)
        if isinstance(v, str):
            raw = v.strip()
            if raw.startswith("["):
                try:
                    v = json.loads(raw)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON in ALLOWED_URL_PROTOCOLS: {e}")
            else:
                v = raw.split(",")
        return v

    @field_validator("allowed_url_protocols", mode="after")
    @classmethod
    def normalize_protocols(cls, v: list[str]) -> list[str]:
        """Lowercase, trim and de-duplicate schemes; at least one is required."""
        seen: list[str] = []
        for protocol in v:
            cleaned = protocol.strip().lower().rstrip(":")
            if cleaned and cleaned not in seen:
                seen.append(cleaned)
        if not seen:
            raise ValueError("ALLOWED_URL_PROTOCOLS must name at least one scheme")
        return seen

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
