"""
Random dish selection.

pick_random_dish() flow:
    READY? -> random small id -> "large-medium-small" path -> ranking -> random recipe

Every failure is returned as a DishSelection with an error kind instead of an
exception, so the API layer only maps kinds to HTTP statuses.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dishpicker.connectors.base import BaseConnector
from dishpicker.errors import DishPickerError
from dishpicker.models import RecipeRecord
from dishpicker.state import AppState

logger = logging.getLogger(__name__)


class SelectorErrorKind(str, Enum):
    """Why a dish could not be selected."""
    NOT_READY = "not_ready"
    PATH_RESOLUTION = "path_resolution"
    EMPTY_CATEGORY = "empty_category"  # retryable: pick again
    UPSTREAM = "upstream"


@dataclass(frozen=True)
class DishSelection:
    """Outcome of pick_random_dish(): a recipe, or an error kind with a message."""
    recipe: Optional[RecipeRecord] = None
    error: Optional[SelectorErrorKind] = None
    small_category_id: Optional[str] = None
    category_path: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and self.recipe is not None


class DishSelector:
    """
    Picks a random recipe from a random small category.

    Args:
        state: Shared AppState (load state, category store, random source)
        connector: Connector used for the ranking call
    """

    def __init__(self, state: AppState, connector: BaseConnector) -> None:
        self.state = state
        self.connector = connector

    def pick_random_dish(self) -> DishSelection:
        load_state = self.state.load_state
        store = self.state.store
        if not load_state.is_ready or store is None or not store.small_ids:
            return DishSelection(error=SelectorErrorKind.NOT_READY, message=load_state.message)

        small_id = self.state.random.choice(store.small_ids)
        path = store.resolve_full_path(small_id)
        if path is None:
            logger.error("Could not build full category path for small category: %s", small_id)
            return DishSelection(
                error=SelectorErrorKind.PATH_RESOLUTION,
                small_category_id=small_id,
                message=f"Could not resolve category path for small category {small_id}",
            )

        try:
            recipes = self.connector.fetch_ranking(path)
        except DishPickerError as e:
            logger.error(
                "Ranking fetch failed for category %s: %s (url=%s status=%s)",
                path,
                e,
                e.url,
                e.status_code,
            )
            return DishSelection(
                error=SelectorErrorKind.UPSTREAM,
                small_category_id=small_id,
                category_path=path,
                message=str(e),
            )

        if not recipes:
            logger.warning("No recipes returned for category %s", path)
            return DishSelection(
                error=SelectorErrorKind.EMPTY_CATEGORY,
                small_category_id=small_id,
                category_path=path,
                message=f"No ranked recipes in category {path}",
            )

        recipe = self.state.random.choice(recipes)
        logger.info("Selected dish: %s (category=%s, url=%s)", recipe.title, path, recipe.url)
        return DishSelection(recipe=recipe, small_category_id=small_id, category_path=path)
