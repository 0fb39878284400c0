"""
Category store: medium/small lookup tables and full category path resolution.

The Rakuten ranking endpoint expects a "large-medium-small" path. The category
list only tells us each small category's medium parent and each medium
category's large parent, so the path is rebuilt from two lookups:

    small id -> small record -> medium id -> medium record -> large id

Large categories are never fetched; their id is only needed as part of the path.

The store is built once by load_category_store() and never mutated afterwards.
"""

import logging
import time
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Sequence

from dishpicker.connectors.base import BaseConnector
from dishpicker.errors import DishPickerError
from dishpicker.models import CategoryRecord

logger = logging.getLogger(__name__)

# Seconds to wait between category list calls (upstream limit: 1 request/second)
REQUEST_INTERVAL_SECONDS = 1.5


class CategoryStore:
    """
    Immutable snapshot of the medium and small category tables.

    Attributes:
        medium: Medium categories keyed by id (read-only mapping)
        small: Small categories keyed by id (read-only mapping)
        small_ids: Small category ids in shuffled order
    """

    def __init__(
        self,
        medium: Mapping[str, CategoryRecord],
        small: Mapping[str, CategoryRecord],
        small_ids: Optional[Sequence[str]] = None,
    ) -> None:
        self.medium: Mapping[str, CategoryRecord] = MappingProxyType(dict(medium))
        self.small: Mapping[str, CategoryRecord] = MappingProxyType(dict(small))
        self.small_ids = tuple(small_ids) if small_ids is not None else tuple(self.small.keys())

    def resolve_full_path(self, small_id: str) -> Optional[str]:
        """
        Build the "large-medium-small" path for a small category.

        Args:
            small_id: Small category id

        Returns:
            Path string such as "10-276-1485", or None if the small category, its
            medium parent or the medium category's large parent is unknown.

        Examples:
            >>> store = CategoryStore(
            ...     medium={"10": CategoryRecord(id="10", parent_id="1")},
            ...     small={"101": CategoryRecord(id="101", parent_id="10")},
            ... )
            >>> store.resolve_full_path("101")
            '1-10-101'
            >>> store.resolve_full_path("999") is None
            True
        """
        small_category = self.small.get(small_id)
        if small_category is None:
            logger.warning("Small category id not found: %s", small_id)
            return None

        medium_id = small_category.parent_id
        medium_category = self.medium.get(medium_id) if medium_id else None
        if medium_category is None:
            logger.warning("Medium parent category not found: %r for small: %s", medium_id, small_id)
            return None

        large_id = medium_category.parent_id
        if not large_id:
            logger.warning("Large parent category missing for medium: %s (small: %s)", medium_id, small_id)
            return None

        return f"{large_id}-{medium_id}-{small_id}"

    def __len__(self) -> int:
        return len(self.small_ids)


def load_category_store(
    connector: BaseConnector,
    shuffle: Optional[Callable[[List[str]], None]] = None,
    request_interval: float = REQUEST_INTERVAL_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> CategoryStore:
    """
    Load the medium and small category tables and build a CategoryStore.

    The two list calls are separated, and followed, by request_interval seconds
    to stay within the upstream rate limit. Both tables are returned together or
    not at all.

    Args:
        connector: Connector used to fetch the category lists
        shuffle: In-place shuffle applied to the small category ids (optional)
        request_interval: Pause after each list call, in seconds
        sleep: Sleep function (injectable for tests)

    Returns:
        CategoryStore with shuffled small ids

    Raises:
        DishPickerError: If a list call fails or the small table is empty.
    """
    medium = connector.fetch_category_type("medium")
    sleep(request_interval)

    small = connector.fetch_category_type("small")
    sleep(request_interval)

    if not small:
        raise DishPickerError("Small category data is empty or could not be retrieved.")

    small_ids = list(small.keys())
    if shuffle is not None:
        shuffle(small_ids)

    logger.info("Category load complete: medium=%d small=%d", len(medium), len(small))
    return CategoryStore(medium=medium, small=small, small_ids=small_ids)
