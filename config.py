"""Configuration for region-authz.

Loads settings from environment variables with sensible defaults.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass
class AppConfig:
    """Top-level application configuration."""
    cities_csv: str = "data/cities.csv"
    log_level: str = "INFO"
    reject_cycles: bool = False  # refuse parent links that close a cycle

    @classmethod
    def from_env(cls) -> "AppConfig":
        return cls(
            cities_csv=os.getenv("REGION_AUTHZ_CITIES_CSV", "data/cities.csv"),
            log_level=os.getenv("REGION_AUTHZ_LOG_LEVEL", "INFO").upper(),
            reject_cycles=_env_flag("REGION_AUTHZ_REJECT_CYCLES", False),
        )
