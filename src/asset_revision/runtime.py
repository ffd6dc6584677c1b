"""Deployment environment resolution."""

from __future__ import annotations

import os

DEFAULT_ENVIRONMENT = "development"
ENVIRONMENT_VARIABLES: tuple[str, ...] = ("ASSET_ENV", "APP_ENV")


def current_environment(explicit: str | None = None, configured: str | None = None) -> str:
    env_name = _clean(explicit) or _clean(configured)
    if not env_name:
        for name in ENVIRONMENT_VARIABLES:
            env_name = _clean(os.getenv(name))
            if env_name:
                break
    return (env_name or DEFAULT_ENVIRONMENT).lower()


def _clean(value: str | None) -> str | None:
    text = str(value or "").strip()
    return text or None
