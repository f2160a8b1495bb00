# This file defines runtime settings for the API layer in one place.
# It exists so the storefront domain, Admin API version, access token, and default variant can change without code edits.
# The config loader reads `.env` plus environment variables and applies safe defaults for local development.
# Validators reject values that would produce a malformed Admin API URL.

from __future__ import annotations

import os
import re
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

_API_VERSION_RE = re.compile(r"^\d{4}-\d{2}$")
_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9.-]+$")

DEFAULT_SHOP_DOMAIN = "play-farhan.myshopify.com"
DEFAULT_ADMIN_API_VERSION = "2025-07"
DEFAULT_VARIANT_ID = "45626932789401"


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Protection Fee Relay"
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "local"
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    request_timeout_seconds: int = 30
    shop_domain: str = DEFAULT_SHOP_DOMAIN
    admin_api_version: str = DEFAULT_ADMIN_API_VERSION
    admin_api_token: str
    default_variant_id: str = DEFAULT_VARIANT_ID
    app_version: str = "0.1.0"

    @field_validator("request_timeout_seconds", "port")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    @field_validator("admin_api_version")
    @classmethod
    def validate_admin_api_version(cls, value: str) -> str:
        if not _API_VERSION_RE.match(value):
            raise ValueError("admin_api_version must look like '2025-07'.")
        return value

    @field_validator("shop_domain")
    @classmethod
    def validate_shop_domain(cls, value: str) -> str:
        cleaned = value.strip().removeprefix("https://").rstrip("/")
        if not cleaned or not _DOMAIN_RE.match(cleaned):
            raise ValueError(f"shop_domain must be a bare host name, got {value!r}")
        return cleaned

    @field_validator("default_variant_id")
    @classmethod
    def validate_default_variant_id(cls, value: str) -> str:
        if not value.isdigit():
            raise ValueError(f"default_variant_id must be numeric, got {value!r}")
        return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Protection Fee Relay"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", _env_int("PORT", 3000)),
        "environment": os.getenv("ENV", "local"),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", ["*"]),
        "request_timeout_seconds": _env_int("API_REQUEST_TIMEOUT_SECONDS", 30),
        "shop_domain": os.getenv("SHOPIFY_DOMAIN", DEFAULT_SHOP_DOMAIN),
        "admin_api_version": os.getenv("SHOPIFY_API_VERSION", DEFAULT_ADMIN_API_VERSION),
        "admin_api_token": os.getenv("ADMIN_API_TOKEN", ""),
        "default_variant_id": os.getenv("PROTECTION_VARIANT_ID", DEFAULT_VARIANT_ID),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }
    if not config_values["admin_api_token"]:
        raise RuntimeError("ADMIN_API_TOKEN is required for API startup.")

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
