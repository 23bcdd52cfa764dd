"""
secrets_manager
================

Loads API credentials from environment variables with an optional
``*_FILE`` override.  If ``{name}_FILE`` is set, the secret is read from
that file instead of the environment, which lets operators mount
credentials as files (Docker or Kubernetes secrets) without exposing them
in the process environment.

Example usage::

    from broker.secrets_manager import EnvFileSecretsManager

    secrets = EnvFileSecretsManager()
    api_key = secrets.get_secret("BITFLYER_API_KEY")
    api_secret = secrets.get_secret("BITFLYER_API_SECRET")
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional


logger = logging.getLogger(__name__)


class BaseSecretsManager:
    """Abstract base class for secrets managers."""

    def get_secret(self, name: str) -> Optional[str]:  # pragma: no cover - override
        """Return the secret value for ``name`` or ``None`` if unavailable."""
        raise NotImplementedError


class EnvFileSecretsManager(BaseSecretsManager):
    """
    Loads secrets from environment variables and optional ``*_FILE`` paths.

    If both ``{name}`` and ``{name}_FILE`` are set, the file takes
    precedence.  Values are cached after the first lookup.
    """

    def __init__(self, base_path: Optional[Path] = None) -> None:
        #: Optional base directory to resolve relative file paths.
        self.base_path = base_path
        self._cache: Dict[str, Optional[str]] = {}

    def get_secret(self, name: str) -> Optional[str]:
        if name in self._cache:
            return self._cache[name]

        file_path = os.getenv(f"{name}_FILE")
        if file_path:
            path = Path(file_path)
            if not path.is_absolute() and self.base_path is not None:
                path = self.base_path / path
            try:
                value: Optional[str] = path.read_text(encoding="utf-8").strip()
            except OSError as exc:
                logger.warning("Failed to read secret file for %s: %s", name, exc)
                value = None
        else:
            value = os.getenv(name)

        self._cache[name] = value
        return value


def get_default_secrets_manager() -> BaseSecretsManager:
    base_path = os.getenv("SECRETS_BASE_PATH")
    return EnvFileSecretsManager(base_path=Path(base_path) if base_path else None)


__all__ = [
    "BaseSecretsManager",
    "EnvFileSecretsManager",
    "get_default_secrets_manager",
]
