"""Response body decoding and normalization.

Discourse answers with JSON for almost every endpoint, but some success
responses (API key revocation) carry an empty or plain-text body. Bodies are
decoded leniently and then restricted to the fields this client understands.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .exceptions import UnexpectedFieldsError

logger = logging.getLogger(__name__)

EXPECTED_FIELDS = frozenset({
    "success",
    "message",
    "errors",
    "user_id",
    "user",
    "user_badges",
    "api_key",
    "category",
})

# Fields each endpoint is known to return, kept or not.
USER_LOOKUP_FIELDS = frozenset({
    "user", "user_badges", "badges", "badge_types", "users", "topics", "errors", "error_type",
})
CREATE_USER_FIELDS = frozenset({"success", "active", "message", "user_id", "errors", "values", "is_developer"})
UPDATE_USER_FIELDS = frozenset({"success", "user"})
API_KEY_FIELDS = frozenset({"api_key"})
CATEGORY_FIELDS = frozenset({"category"})

UNKNOWN_FIELDS_IGNORE = "ignore"
UNKNOWN_FIELDS_ERROR = "error"
UNKNOWN_FIELDS_POLICIES = (UNKNOWN_FIELDS_IGNORE, UNKNOWN_FIELDS_ERROR)


def decode_body(text: str) -> Any:
    """Decode a response body as JSON, falling back to the raw text."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def normalize_body(
    payload: Any,
    unknown_fields: str = UNKNOWN_FIELDS_IGNORE,
    known_fields: Optional[frozenset] = None,
) -> Any:
    """Restrict a decoded mapping to EXPECTED_FIELDS with ``str`` keys.

    Non-mapping payloads (raw text, lists) pass through untouched.

    Args:
        payload: Decoded response body
        unknown_fields: ``"ignore"`` drops unrecognized fields, ``"error"`` raises
        known_fields: Fields the endpoint documents (EXPECTED_FIELDS when None);
            only fields outside this set count as unrecognized

    Raises:
        UnexpectedFieldsError: Unrecognized fields present and policy is ``"error"``
    """
    if not isinstance(payload, dict):
        return payload

    normalized = {str(key): value for key, value in payload.items()}
    known = EXPECTED_FIELDS if known_fields is None else known_fields
    unknown = sorted(key for key in normalized if key not in known)
    if unknown:
        if unknown_fields == UNKNOWN_FIELDS_ERROR:
            raise UnexpectedFieldsError(unknown)
        logger.debug(f"Dropping unrecognized response fields: {unknown}")
    return {key: value for key, value in normalized.items() if key in EXPECTED_FIELDS}


def has_errors(body: Any) -> bool:
    """Return True when a normalized body carries a populated ``errors`` field."""
    return isinstance(body, dict) and bool(body.get("errors"))


# ─────────────────────────────────────────────────────────────────────────────
# Typed views over normalized bodies
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class UserSummary:
    id: int
    username: str
    name: Optional[str] = None
    active: Optional[bool] = None
    admin: bool = False
    badge_count: int = 0

    @classmethod
    def from_body(cls, body: dict) -> "UserSummary":
        """Build from a ``GET /users/{username}.json`` body."""
        user = body.get("user") or {}
        return cls(
            id=user["id"],
            username=user.get("username", ""),
            name=user.get("name"),
            active=user.get("active"),
            admin=bool(user.get("admin", False)),
            badge_count=len(body.get("user_badges") or []),
        )


@dataclass(frozen=True)
class ApiKeyRecord:
    key: str
    id: Optional[int] = None
    user: dict = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: dict) -> "ApiKeyRecord":
        """Build from a ``generate_api_key`` body."""
        api_key = body.get("api_key") or {}
        return cls(key=api_key["key"], id=api_key.get("id"), user=api_key.get("user") or {})


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    name: str
    slug: Optional[str] = None
    color: Optional[str] = None
    text_color: Optional[str] = None
    parent_category_id: Optional[int] = None

    @classmethod
    def from_body(cls, body: dict) -> "CategoryRecord":
        """Build from a ``POST /categories`` body."""
        category = body.get("category") or {}
        return cls(
            id=category["id"],
            name=category.get("name", ""),
            slug=category.get("slug"),
            color=category.get("color"),
            text_color=category.get("text_color"),
            parent_category_id=category.get("parent_category_id"),
        )
