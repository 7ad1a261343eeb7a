"""Discourse user lifecycle operations."""
from __future__ import annotations
import logging
from typing import Any, Optional, Union

from .client import (
    USER_NOT_FOUND,
    DiscourseClient,
    DiscourseResponse,
    get_default_client,
    unexpected_body,
    unexpected_status,
)
from .responses import CREATE_USER_FIELDS, UPDATE_USER_FIELDS, USER_LOOKUP_FIELDS, has_errors
from .result import Result, raising

logger = logging.getLogger(__name__)


class UserService:
    """Service for looking up, creating and (de)activating Discourse users.

    A 404 from the lookup and update endpoints is reported as a successful
    result carrying ``"User not found"``; callers must inspect the value.
    """

    def __init__(self, client: DiscourseClient):
        """Initialize user service.

        Args:
            client: Discourse client
        """
        self.client = client

    def user_id(self, username: str) -> Result[Union[int, str], Any]:
        """Return the user's numeric id, or ``"User not found"``.

        Args:
            username: Discourse username

        Returns:
            ``Result.ok(id)`` / ``Result.ok("User not found")``, or
            ``Result.err(reason)`` on transport failure or a malformed body
        """
        return self._lookup(username, "id")

    def user(self, username: str) -> Result[Union[dict, str], Any]:
        """Return the normalized user body (``user``, ``user_badges``), or ``"User not found"``."""
        return self._lookup(username)

    def create_user(self, name: str, email: str, password: str) -> Result[Any, Any]:
        """Create an active user whose username equals ``name``.

        Discourse answers validation problems (taken username or email,
        short password) with HTTP 200 and an ``errors`` mapping, e.g.
        ``{"password": ["is too short (minimum is 10 characters)"]}``;
        that mapping becomes the failure reason.
        """
        form = {
            "name": name,
            "username": name,
            "email": email,
            "password": password,
            "active": True,
        }
        result = self.client.post("/users", data=form, params=self.client.auth_params())
        if result.is_err:
            return result

        response: DiscourseResponse = result.value
        if response.status_code == 200:
            read = self.client.read_body(response, CREATE_USER_FIELDS)
            if read.is_err:
                return read
            body = read.value
            if has_errors(body):
                logger.info(f"User '{name}' rejected by Discourse: {sorted(body['errors'])}")
                return Result.err(body["errors"])
            logger.info(f"User '{name}' created")
            return Result.ok(body)
        return unexpected_status(response)

    def deactivate_user(self, username: str) -> Result[str, Any]:
        """Deactivate the user, returning Discourse's status string or ``"User not found"``."""
        return self._set_active(username, False)

    def reactivate_user(self, username: str) -> Result[str, Any]:
        """Reactivate the user, returning Discourse's status string or ``"User not found"``."""
        return self._set_active(username, True)

    user_id_or_raise = raising(user_id)
    user_or_raise = raising(user)
    create_user_or_raise = raising(create_user)
    deactivate_user_or_raise = raising(deactivate_user)
    reactivate_user_or_raise = raising(reactivate_user)

    def _lookup(self, username: str, user_field: Optional[str] = None) -> Result:
        result = self.client.get(f"/users/{username}.json")
        if result.is_err:
            return result

        response: DiscourseResponse = result.value
        if response.status_code == 200:
            read = self.client.read_body(response, USER_LOOKUP_FIELDS)
            if read.is_err:
                return read
            user = read.value.get("user")
            if not isinstance(user, dict) or (user_field and user_field not in user):
                return unexpected_body(response)
            return Result.ok(user[user_field] if user_field else read.value)
        if response.status_code == 404:
            return Result.ok(USER_NOT_FOUND)
        return unexpected_status(response)

    def _set_active(self, username: str, active: bool) -> Result[str, Any]:
        result = self.client.put(
            f"/users/{username}",
            data={"username": username, "active": active},
            params=self.client.auth_params(),
        )
        if result.is_err:
            return result

        response: DiscourseResponse = result.value
        if response.status_code == 200:
            read = self.client.read_body(response, UPDATE_USER_FIELDS)
            if read.is_err:
                return read
            if "success" not in read.value:
                return unexpected_body(response)
            logger.info(f"User '{username}' {'reactivated' if active else 'deactivated'}")
            return Result.ok(read.value["success"])
        if response.status_code == 404:
            return Result.ok(USER_NOT_FOUND)
        return unexpected_status(response)


# ─────────────────────────────────────────────────────────────────────────────
# Standalone functions using the process-wide default client
# ─────────────────────────────────────────────────────────────────────────────

def user_id(username: str) -> Result:
    """Return the user's id or ``"User not found"``."""
    return UserService(get_default_client()).user_id(username)


def user(username: str) -> Result:
    """Return the normalized user body or ``"User not found"``."""
    return UserService(get_default_client()).user(username)


def create_user(name: str, email: str, password: str) -> Result:
    """Create an active user."""
    return UserService(get_default_client()).create_user(name, email, password)


def deactivate_user(username: str) -> Result:
    """Deactivate a user."""
    return UserService(get_default_client()).deactivate_user(username)


def reactivate_user(username: str) -> Result:
    """Reactivate a user."""
    return UserService(get_default_client()).reactivate_user(username)


user_id_or_raise = raising(user_id)
user_or_raise = raising(user)
create_user_or_raise = raising(create_user)
deactivate_user_or_raise = raising(deactivate_user)
reactivate_user_or_raise = raising(reactivate_user)
