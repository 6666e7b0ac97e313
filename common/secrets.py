import json
import os
from pathlib import Path
from typing import Any, Optional


class SecretsManager:
    """Load API credentials from a JSON file pointed to by ``SECRETS_PATH``.

    The file is cached on first access. Keys missing from the file fall back
    to the environment variable of the same name. Tests may replace the
    in-memory cache via :meth:`set_override`.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(
            path or os.getenv("SECRETS_PATH", "/var/run/secrets/xero.json")
        )
        self._cache: dict[str, Any] | None = None
        self._overridden = False

    def _load(self) -> dict[str, Any]:
        if self._cache is None:
            try:
                with self._path.open("r", encoding="utf-8") as fh:
                    self._cache = json.load(fh)
            except FileNotFoundError:
                self._cache = {}
        return self._cache

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return secret value for *key* or *default* if missing."""

        data = self._load()
        if key in data:
            return data[key]
        if self._overridden:
            return default
        return os.getenv(key, default)

    def set_override(self, data: dict[str, Any]) -> None:
        """Replace the entire secret cache and ignore the environment (test helper)."""

        self._cache = dict(data)
        self._overridden = True

    def reset(self) -> None:
        """Drop the cache so the next lookup re-reads the file."""

        self._cache = None
        self._overridden = False


# Global default manager
secrets = SecretsManager()


def get_secret(key: str, default: Optional[Any] = None) -> Any:
    """Convenience wrapper around :class:`SecretsManager`."""

    return secrets.get(key, default)
