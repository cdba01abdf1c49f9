"""
Shared utilities for the budget template services.

This package contains code shared across services and clients:
- settings: Environment-driven configuration for the template gateway
- observability: Telemetry, JSON logging and log-safe payload helpers
"""

from .settings import (
    DEFAULT_GATEWAY_URL,
    DEFAULT_TEMPLATES_PATH,
    GatewaySettings,
    ServiceSettings,
    SettingsError,
    load_gateway_settings,
    load_service_settings,
)

__all__ = [
    "DEFAULT_GATEWAY_URL",
    "DEFAULT_TEMPLATES_PATH",
    "GatewaySettings",
    "ServiceSettings",
    "SettingsError",
    "load_gateway_settings",
    "load_service_settings",
]
