"""
Shared environment-driven settings for the budget template stack.

The template service (which stores documents) and the editing-session client
(which talks to it) read the same handful of variables. Parsing them in one
place keeps defaults and validation consistent between the two sides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

TEMPLATE_GATEWAY_URL_ENV = "TEMPLATE_GATEWAY_URL"
TEMPLATES_PATH_ENV = "TEMPLATE_GATEWAY_TEMPLATES_PATH"
CORS_ORIGINS_ENV = "TEMPLATE_SERVICE_CORS_ORIGINS"

DEFAULT_GATEWAY_URL = "http://localhost:8004"
DEFAULT_TEMPLATES_PATH = "/budget-templates"
DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)


class SettingsError(RuntimeError):
    """Raised when environment configuration cannot be turned into settings."""


@dataclass(frozen=True, slots=True)
class GatewaySettings:
    base_url: str
    templates_path: str

    @property
    def templates_url(self) -> str:
        return f"{self.base_url}{self.templates_path}"


@dataclass(frozen=True, slots=True)
class ServiceSettings:
    cors_origins: tuple[str, ...]


def load_gateway_settings(
    *,
    url_env: str = TEMPLATE_GATEWAY_URL_ENV,
    path_env: str = TEMPLATES_PATH_ENV,
    default_url: str = DEFAULT_GATEWAY_URL,
    default_path: str = DEFAULT_TEMPLATES_PATH,
) -> GatewaySettings:
    """
    Build client-side settings for reaching the template persistence gateway.

    Args:
        url_env: Env var holding the gateway base URL (scheme + host [+ port]).
        path_env: Env var overriding the templates collection path.
        default_*: Fallback values when the env var is unset/empty.
    """

    base_url = _parse_url(os.getenv(url_env), default_url, url_env)
    templates_path = _normalize_path(os.getenv(path_env), default_path)
    return GatewaySettings(base_url=base_url, templates_path=templates_path)


def load_service_settings(*, cors_env: str = CORS_ORIGINS_ENV) -> ServiceSettings:
    raw_value = os.getenv(cors_env)
    if not raw_value:
        return ServiceSettings(cors_origins=DEFAULT_CORS_ORIGINS)

    origins = [origin.strip() for origin in raw_value.split(",") if origin.strip()]
    if not origins:
        return ServiceSettings(cors_origins=DEFAULT_CORS_ORIGINS)
    # Starlette expects ["*"] rather than '*' mixed with explicit origins.
    if "*" in origins:
        return ServiceSettings(cors_origins=("*",))
    return ServiceSettings(cors_origins=tuple(origins))


def _parse_url(raw_value: Optional[str], default: str, env_key: str) -> str:
    candidate = (raw_value or "").strip() or default
    parsed = urlparse(candidate)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise SettingsError(f"{env_key} must be an http(s) URL (received '{candidate}')")
    return candidate.rstrip("/")


def _normalize_path(raw_value: Optional[str], default: str) -> str:
    candidate = (raw_value or "").strip() or default
    if not candidate.startswith("/"):
        candidate = f"/{candidate}"
    return candidate.rstrip("/") or default
