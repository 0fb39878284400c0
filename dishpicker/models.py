"""
Category and recipe models for the dish picker.

This module defines the records produced by the Rakuten Recipe connector and
shared by the category store, the dish selector and the API layer.

- CategoryRecord: one entry of the medium or small category table
- RecipeRecord: one recipe from a category ranking
- LoadStatus / LoadState: lifecycle of the one-time category load

# NOTE: The upstream API sends categoryId and parentCategoryId as integers for
    medium/small categories. They are stored as strings throughout the
    application so that lookups and the "large-medium-small" path never depend
    on the wire type.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Delimiter used to display the ingredient list (Japanese enumeration comma)
INGREDIENT_DELIMITER = "、"

UNKNOWN_TITLE = "(unknown)"
NO_DESCRIPTION = "No description."
UNKNOWN_INGREDIENTS = "Ingredients unknown."


class CategoryRecord(BaseModel):
    """
    A medium or small category from the Rakuten category list.

    Records are immutable once loaded. parent_id points at the medium category
    for small records and at the large category for medium records.
    """
    id: str = Field(..., description="Category identifier (stringified categoryId)")
    parent_id: str = Field(..., description="Parent category identifier (stringified parentCategoryId)")
    name: str = Field("", description="Display name of the category")

    model_config = ConfigDict(frozen=True)

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        if value is None:
            return ""
        return str(value)


class RecipeRecord(BaseModel):
    """
    A single recipe from a category ranking, with upstream fallbacks applied.

    ingredients keeps the original order. ingredients_known is False when the
    upstream recipeMaterial field was absent or not a list; ingredients_text then
    returns the placeholder instead of an empty string.
    """
    title: str = Field(UNKNOWN_TITLE, description="Recipe title")
    image_url: str = Field("", description="Food image URL (foodImageUrl, falling back to mediumImageUrl)")
    description: str = Field(NO_DESCRIPTION, description="Recipe description")
    ingredients: List[str] = Field(default_factory=list, description="Ingredient list in upstream order")
    ingredients_known: bool = Field(True, description="Whether the upstream ingredient list was present")
    url: str = Field("", description="Recipe page URL")

    model_config = ConfigDict(frozen=True)

    @property
    def ingredients_text(self) -> str:
        """Ingredients joined for display, or the unknown placeholder."""
        if not self.ingredients_known:
            return UNKNOWN_INGREDIENTS
        return INGREDIENT_DELIMITER.join(self.ingredients)


class LoadStatus(str, Enum):
    """Lifecycle of the one-time category load. READY and FAILED are terminal."""
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class LoadState(BaseModel):
    """Current load status together with the message shown to users."""
    status: LoadStatus = LoadStatus.LOADING
    message: str = "Loading category data..."

    model_config = ConfigDict(frozen=True)

    @property
    def is_ready(self) -> bool:
        return self.status == LoadStatus.READY
