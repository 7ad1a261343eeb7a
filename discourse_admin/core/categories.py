"""Discourse category creation."""
from __future__ import annotations
import logging
from typing import Any, Optional

from .client import (
    INTERNAL_SERVER_ERROR,
    DiscourseClient,
    DiscourseResponse,
    get_default_client,
    unexpected_body,
    unexpected_status,
)
from .responses import CATEGORY_FIELDS
from .result import Result, raising

logger = logging.getLogger(__name__)

DEFAULT_TEXT_COLOR = "FFFFFF"


class CategoryService:
    """Service for creating community topics (top-level categories) and subcategories."""

    def __init__(self, client: DiscourseClient):
        self.client = client

    def create_community_topic(self, name: str, color: str) -> Result[Any, Any]:
        """Create a top-level category with default text color and no description.

        Args:
            name: Category name
            color: Background color as hex without ``#`` (e.g., "0088CC")
        """
        return self._create(name, color, description="")

    def create_category(
        self,
        name: str,
        color: str,
        parent_category_id: Optional[int],
        description: str,
        icon: str,
    ) -> Result[Any, Any]:
        """Create a category, nested under ``parent_category_id`` when given.

        Args:
            name: Category name
            color: Background color as hex without ``#``
            parent_category_id: Parent category id, or None for a top-level category
            description: Category description
            icon: Icon name shown next to the category
        """
        return self._create(name, color, description=description, parent_category_id=parent_category_id, icon=icon)

    create_community_topic_or_raise = raising(create_community_topic)
    create_category_or_raise = raising(create_category)

    def _create(
        self,
        name: str,
        color: str,
        description: str,
        parent_category_id: Optional[int] = None,
        icon: Optional[str] = None,
    ) -> Result[Any, Any]:
        form = dict(self.client.auth_params())
        form.update({
            "name": name,
            "color": color,
            "text_color": DEFAULT_TEXT_COLOR,
            "description": description,
        })
        if parent_category_id is not None:
            form["parent_category_id"] = parent_category_id
        if icon is not None:
            form["icon"] = icon

        result = self.client.post("/categories", data=form)
        if result.is_err:
            return result

        response: DiscourseResponse = result.value
        if response.status_code == 200:
            read = self.client.read_body(response, CATEGORY_FIELDS)
            if read.is_err:
                return read
            category = read.value.get("category")
            if not isinstance(category, dict) or "id" not in category:
                return unexpected_body(response)
            logger.info(f"Category '{name}' created")
            return read
        if response.status_code == 500:
            logger.warning(f"Discourse returned 500 while creating category '{name}'")
            return Result.err(INTERNAL_SERVER_ERROR)
        return unexpected_status(response)


# ─────────────────────────────────────────────────────────────────────────────
# Standalone functions using the process-wide default client
# ─────────────────────────────────────────────────────────────────────────────

def create_community_topic(name: str, color: str) -> Result:
    return CategoryService(get_default_client()).create_community_topic(name, color)


def create_category(name: str, color: str, parent_category_id: Optional[int], description: str, icon: str) -> Result:
    return CategoryService(get_default_client()).create_category(name, color, parent_category_id, description, icon)


create_community_topic_or_raise = raising(create_community_topic)
create_category_or_raise = raising(create_category)
