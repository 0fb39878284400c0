"""
Base connector abstract class for recipe API integrations.

This module defines the interface the category store and the dish selector rely
on. Keeping it abstract lets tests swap in a fake connector without patching
HTTP calls, and keeps the Rakuten specifics in one place.

All connectors must:
- Provide fetch_category_type returning category records keyed by id
- Provide fetch_ranking returning the ranked recipes of a full category path
- Raise dishpicker.errors.TransportError / ParseError on failures
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from dishpicker.models import CategoryRecord, RecipeRecord


class BaseConnector(ABC):
    """
    Abstract base class for recipe API connectors.

    Attributes:
        source: String identifier for the upstream API (e.g., "rakuten")
    """
    source: str

    @abstractmethod
    def fetch_category_type(self, category_type: str) -> Dict[str, CategoryRecord]:
        """
        Fetch every category of the given type.

        Args:
            category_type: "medium" or "small"

        Returns:
            Mapping of category id (as string) to CategoryRecord. Empty if the
            upstream payload does not contain the requested type.
        """
        pass

    @abstractmethod
    def fetch_ranking(self, full_category_id: str) -> List[RecipeRecord]:
        """
        Fetch the ranked recipes of a category.

        Args:
            full_category_id: "large-medium-small" category path (e.g., "10-276-1485")

        Returns:
            List of RecipeRecord objects in ranking order. Empty if the category
            has no ranked recipes.
        """
        pass
