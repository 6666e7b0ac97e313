"""Runtime settings for the Xero gateway.

Environment files are loaded once on import (``.env.local`` first, then
``.env``) without overriding variables already exported. Credentials come
from the secrets manager rather than plain environment variables.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Final, Optional

from dotenv import load_dotenv

from common.secrets import get_secret

__all__ = [
    "DEFAULT_BASE_URL",
    "access_token",
    "base_url",
    "tenant_id",
    "timeout",
]

_LOG = logging.getLogger(__name__)

DEFAULT_BASE_URL: Final[str] = "https://api.xero.com/api.xro/2.0"

for _env_file in (Path.cwd() / ".env.local", Path.cwd() / ".env"):
    if _env_file.exists():
        load_dotenv(dotenv_path=_env_file, override=False)
        _LOG.debug("loaded env file %s", _env_file)
        break


def base_url() -> str:
    return os.getenv("XERO_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def timeout() -> float:
    raw = os.getenv("XERO_TIMEOUT", "30")
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"XERO_TIMEOUT must be numeric, got {raw!r}") from exc


def access_token() -> Optional[str]:
    return get_secret("XERO_ACCESS_TOKEN")


def tenant_id() -> Optional[str]:
    return get_secret("XERO_TENANT_ID")
