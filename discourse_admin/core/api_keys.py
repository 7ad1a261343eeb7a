"""Discourse per-user API key management."""
from __future__ import annotations
import logging
from typing import Any

from .client import (
    INTERNAL_SERVER_ERROR,
    DiscourseClient,
    DiscourseResponse,
    get_default_client,
    unexpected_body,
    unexpected_status,
)
from .responses import API_KEY_FIELDS, ApiKeyRecord
from .result import Result, raising

logger = logging.getLogger(__name__)

API_KEY_REVOKED = "API key successfully revoked"


class ApiKeyService:
    """Service for generating and revoking user API keys."""

    def __init__(self, client: DiscourseClient):
        self.client = client

    def generate_user_api_key(self, user_id: int) -> Result[str, Any]:
        """Generate an API key for the user and return the key string."""
        result = self.client.post(
            f"/admin/users/{user_id}/generate_api_key",
            data=self.client.auth_params(),
        )
        return self._map(result, user_id, self._extract_key, "generated")

    def revoke_user_api_key(self, user_id: int) -> Result[str, Any]:
        """Revoke the user's API key.

        The endpoint answers with an empty body on success, so only the
        status code is inspected.
        """
        result = self.client.delete(
            f"/admin/users/{user_id}/revoke_api_key",
            data=self.client.auth_params(),
        )
        return self._map(result, user_id, lambda response: Result.ok(API_KEY_REVOKED), "revoked")

    generate_user_api_key_or_raise = raising(generate_user_api_key)
    revoke_user_api_key_or_raise = raising(revoke_user_api_key)

    def _map(self, result: Result, user_id: int, extract, action: str) -> Result:
        if result.is_err:
            return result

        response: DiscourseResponse = result.value
        if response.status_code == 200:
            extracted = extract(response)
            if extracted.is_ok:
                logger.info(f"API key {action} for user {user_id}")
            return extracted
        if response.status_code == 500:
            logger.warning(f"Discourse returned 500 while API key was being {action} for user {user_id}")
            return Result.err(INTERNAL_SERVER_ERROR)
        return unexpected_status(response)

    def _extract_key(self, response: DiscourseResponse) -> Result[str, Any]:
        read = self.client.read_body(response, API_KEY_FIELDS)
        if read.is_err:
            return read
        api_key = read.value.get("api_key")
        if not isinstance(api_key, dict) or not isinstance(api_key.get("key"), str):
            return unexpected_body(response)
        return Result.ok(ApiKeyRecord.from_body(read.value).key)


# ─────────────────────────────────────────────────────────────────────────────
# Standalone functions using the process-wide default client
# ─────────────────────────────────────────────────────────────────────────────

def generate_user_api_key(user_id: int) -> Result:
    return ApiKeyService(get_default_client()).generate_user_api_key(user_id)


def revoke_user_api_key(user_id: int) -> Result:
    return ApiKeyService(get_default_client()).revoke_user_api_key(user_id)


generate_user_api_key_or_raise = raising(generate_user_api_key)
revoke_user_api_key_or_raise = raising(revoke_user_api_key)
