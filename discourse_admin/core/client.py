"""Low-level HTTP client for the Discourse admin API.

Handles URL building, credential injection and response decoding. Status
code interpretation belongs to the service modules (users, api_keys,
categories); this module only reports what came back, or the transport
failure that prevented a response.
"""
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .exceptions import MissingCredentialsError, UnexpectedFieldsError
from .responses import UNKNOWN_FIELDS_IGNORE, UNKNOWN_FIELDS_POLICIES, decode_body, normalize_body
from .result import Result, TransportFailure

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
INTERNAL_SERVER_ERROR = "Internal server error"
UNEXPECTED_BODY = "Unexpected response body"


@dataclass(frozen=True)
class DiscourseCredentials:
    """Base endpoint plus the admin username/API key pair."""

    endpoint: str
    username: str = ""
    api_key: str = ""

    def __post_init__(self):
        object.__setattr__(self, "endpoint", self.endpoint.rstrip("/"))

    @property
    def is_privileged(self) -> bool:
        return bool(self.username and self.api_key)

    def __repr__(self) -> str:
        return f"DiscourseCredentials(endpoint={self.endpoint!r}, username={self.username!r}, api_key='***')"


@dataclass(frozen=True)
class DiscourseResponse:
    """Status code and decoded (not yet normalized) body of a completed request."""

    status_code: int
    body: Any


def unexpected_status(response: DiscourseResponse) -> Result:
    """Failure result for a status code the endpoint does not document."""
    logger.warning(f"Unexpected Discourse response status {response.status_code}")
    return Result.err(f"Unexpected response status {response.status_code}")


def unexpected_body(response: DiscourseResponse) -> Result:
    """Failure result for a success status whose body lacks the documented shape."""
    logger.warning(f"Unexpected Discourse response body for status {response.status_code}: {str(response.body)[:80]!r}")
    return Result.err(UNEXPECTED_BODY)


class DiscourseClient:
    """HTTP client for the Discourse admin API.

    Features:
    - One synchronous request per call, no retries
    - Transport failures returned as ``Result.err(TransportFailure)``
    - Optional shared ``requests.Session``

    Usage:
        client = DiscourseClient(DiscourseCredentials("https://forum.example.com", "system", "key"))
        result = client.users.user_id("alice")
    """

    def __init__(
        self,
        credentials: DiscourseCredentials,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        unknown_fields: str = UNKNOWN_FIELDS_IGNORE,
    ):
        """Initialize Discourse client.

        Args:
            credentials: Endpoint and admin credentials
            session: Optional requests session (module-level requests otherwise)
            timeout: Request timeout in seconds (transport default when None)
            unknown_fields: ``"ignore"`` or ``"error"`` for unrecognized response fields
        """
        if unknown_fields not in UNKNOWN_FIELDS_POLICIES:
            raise ValueError(f"unknown_fields must be one of {UNKNOWN_FIELDS_POLICIES}, got {unknown_fields!r}")
        self.credentials = credentials
        self.timeout = timeout
        self.unknown_fields = unknown_fields
        self._http = session if session is not None else requests

    @classmethod
    def from_settings(cls, config=None, session: Optional[requests.Session] = None) -> "DiscourseClient":
        """Build a client from application settings (environment when omitted)."""
        from ..config import load_settings

        config = config or load_settings()
        return cls(
            config.credentials,
            session=session,
            timeout=config.request_timeout,
            unknown_fields=config.unknown_fields,
        )

    @property
    def users(self):
        from .users import UserService
        return UserService(self)

    @property
    def api_keys(self):
        from .api_keys import ApiKeyService
        return ApiKeyService(self)

    @property
    def categories(self):
        from .categories import CategoryService
        return CategoryService(self)

    def url(self, path: str) -> str:
        return f"{self.credentials.endpoint}{path}"

    def auth_params(self) -> Dict[str, str]:
        """Admin credentials as ``api_key``/``api_username`` parameters.

        Raises:
            MissingCredentialsError: If username or API key is not configured
        """
        if not self.credentials.is_privileged:
            raise MissingCredentialsError(
                "Discourse admin username and API key are required for this operation"
            )
        return {"api_key": self.credentials.api_key, "api_username": self.credentials.username}

    def get(self, path: str, params: Optional[Dict] = None) -> Result:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Optional[Dict] = None, params: Optional[Dict] = None) -> Result:
        return self.request("POST", path, data=data, params=params)

    def put(self, path: str, data: Optional[Dict] = None, params: Optional[Dict] = None) -> Result:
        return self.request("PUT", path, data=data, params=params)

    def delete(self, path: str, data: Optional[Dict] = None, params: Optional[Dict] = None) -> Result:
        return self.request("DELETE", path, data=data, params=params)

    def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Result:
        """Issue one request and decode the response.

        Args:
            method: HTTP method
            path: API path (e.g., "/users/alice.json")
            data: Form fields, booleans encoded as ``true``/``false``
            params: Query parameters

        Returns:
            ``Result.ok(DiscourseResponse)`` or ``Result.err(TransportFailure)``
        """
        logger.debug(f"Discourse {method} {path}")
        try:
            resp = self._http.request(
                method,
                self.url(path),
                params=params,
                data=_encode_form(data),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Discourse {method} {path} failed: {e}")
            return Result.err(TransportFailure(str(e)))

        body = decode_body(resp.text)
        logger.debug(f"Discourse {method} {path} -> {resp.status_code}")
        return Result.ok(DiscourseResponse(resp.status_code, body))

    def read_body(self, response: DiscourseResponse, known_fields: frozenset) -> Result:
        """Normalize a success body against the fields its endpoint documents.

        Returns:
            ``Result.ok(dict)``, or ``Result.err`` when the body is not a JSON
            object or carries undocumented fields under the ``"error"`` policy
        """
        if not isinstance(response.body, dict):
            return unexpected_body(response)
        try:
            return Result.ok(normalize_body(response.body, self.unknown_fields, known_fields))
        except UnexpectedFieldsError as e:
            logger.warning(f"Rejected Discourse response: {e}")
            return Result.err(str(e))


def _encode_form(data: Optional[Dict]) -> Optional[Dict[str, Any]]:
    if data is None:
        return None
    return {key: (str(value).lower() if isinstance(value, bool) else value) for key, value in data.items()}


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide default client
# ─────────────────────────────────────────────────────────────────────────────
_default_client: Optional[DiscourseClient] = None
_default_lock = threading.Lock()


def get_default_client() -> DiscourseClient:
    """Return the client built from environment settings, loading them once."""
    global _default_client
    with _default_lock:
        if _default_client is None:
            _default_client = DiscourseClient.from_settings()
        return _default_client


def reset_default_client() -> None:
    """Forget the cached default client (settings are re-read on next use)."""
    global _default_client
    with _default_lock:
        _default_client = None
