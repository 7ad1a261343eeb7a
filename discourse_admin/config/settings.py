"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.client import DiscourseCredentials
from ..core.responses import UNKNOWN_FIELDS_IGNORE, UNKNOWN_FIELDS_POLICIES

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info(f"Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            logger.warning(f"Failed to read /run/secrets/{secret_name}: {e}")

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


def _get_required(var_name: str) -> str:
    """Get environment variable or fail."""
    value = os.environ.get(var_name, "").strip()
    if value:
        return value
    raise RuntimeError(f"Environment variable {var_name} is required.")


def _parse_timeout(raw: str) -> Optional[float]:
    if not raw.strip():
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise RuntimeError(f"DISCOURSE_REQUEST_TIMEOUT must be a number of seconds, got {raw!r}")
    if timeout <= 0:
        raise RuntimeError("DISCOURSE_REQUEST_TIMEOUT must be positive")
    return timeout


@dataclass(frozen=True)
class AppConfig:
    """Application configuration container."""
    discourse_endpoint: str
    discourse_username: str = ""
    discourse_api_key: str = ""
    request_timeout: Optional[float] = None
    unknown_fields: str = UNKNOWN_FIELDS_IGNORE

    @property
    def credentials(self) -> DiscourseCredentials:
        return DiscourseCredentials(
            endpoint=self.discourse_endpoint,
            username=self.discourse_username,
            api_key=self.discourse_api_key,
        )

    def __repr__(self) -> str:
        return (
            f"AppConfig(discourse_endpoint={self.discourse_endpoint!r}, "
            f"discourse_username={self.discourse_username!r}, discourse_api_key='***', "
            f"request_timeout={self.request_timeout!r}, unknown_fields={self.unknown_fields!r})"
        )


def load_settings() -> AppConfig:
    """Load Discourse settings from environment and /run/secrets."""
    endpoint = _get_required("DISCOURSE_ENDPOINT").rstrip("/")
    username = os.environ.get("DISCOURSE_USERNAME", "").strip()
    api_key = _load_secret_from_file("discourse_api_key", "DISCOURSE_API_KEY") or ""

    if not (username and api_key):
        logger.warning("DISCOURSE_USERNAME/DISCOURSE_API_KEY not set; only user lookups are available")

    unknown_fields = os.environ.get("DISCOURSE_UNKNOWN_FIELDS", UNKNOWN_FIELDS_IGNORE).strip().lower()
    if unknown_fields not in UNKNOWN_FIELDS_POLICIES:
        raise RuntimeError(
            f"DISCOURSE_UNKNOWN_FIELDS must be one of {', '.join(UNKNOWN_FIELDS_POLICIES)}, got {unknown_fields!r}"
        )

    return AppConfig(
        discourse_endpoint=endpoint,
        discourse_username=username,
        discourse_api_key=api_key,
        request_timeout=_parse_timeout(os.environ.get("DISCOURSE_REQUEST_TIMEOUT", "")),
        unknown_fields=unknown_fields,
    )
