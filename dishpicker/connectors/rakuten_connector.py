"""
Rakuten Recipe API connector using requests.

This connector talks to the two Rakuten Recipe endpoints the application needs:
- CategoryList: medium and small categories with their parent ids
- CategoryRanking: the top recipes of a "large-medium-small" category path

The connector:
- Reads the application id from RAKUTEN_APP_ID unless one is passed explicitly
- Applies a socket timeout to every request (RAKUTEN_TIMEOUT_SECONDS, default 10)
- Raises TransportError for network failures and non-2xx responses
- Raises ParseError for bodies that are not JSON objects
- Normalizes ranking entries into RecipeRecord using field fallbacks

Rate limit: the upstream allows one request per second per application id.
Pacing between calls is the caller's job (see dishpicker.categories).
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from dishpicker.errors import ParseError, TransportError
from dishpicker.models import (
    CategoryRecord,
    NO_DESCRIPTION,
    RecipeRecord,
    UNKNOWN_TITLE,
)
from dishpicker.utils.env import get_float_env

from .base import BaseConnector

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_LIST_URL = "https://app.rakuten.co.jp/services/api/Recipe/CategoryList/20170426"
DEFAULT_CATEGORY_RANKING_URL = "https://app.rakuten.co.jp/services/api/Recipe/CategoryRanking/20170426"
DEFAULT_TIMEOUT_SECONDS = 10.0

VALID_CATEGORY_TYPES = {"large", "medium", "small"}


class RakutenRecipeConnector(BaseConnector):
    """
    Connector for the Rakuten Recipe API.

    Without an injected session every call goes through requests.get, which
    opens its own session, so concurrent request handlers never share one.
    Tests can inject a mock session instead of patching the requests module.
    """
    source = "rakuten"

    def __init__(
        self,
        application_id: Optional[str] = None,
        category_list_url: Optional[str] = None,
        category_ranking_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the Rakuten connector.

        Args:
            application_id: Rakuten application id (optional, reads from RAKUTEN_APP_ID env var if not provided)
            category_list_url: CategoryList endpoint (optional, RAKUTEN_CATEGORY_LIST_URL or the 20170426 endpoint)
            category_ranking_url: CategoryRanking endpoint (optional, RAKUTEN_CATEGORY_RANKING_URL or the 20170426 endpoint)
            timeout: Socket timeout in seconds (optional, RAKUTEN_TIMEOUT_SECONDS or 10)
            session: requests.Session to use for every call (optional, not shared across threads by default)

        Raises:
            RuntimeError: If RAKUTEN_APP_ID is not set or RAKUTEN_TIMEOUT_SECONDS is not a number.
        """
        app_id = application_id or os.getenv("RAKUTEN_APP_ID")
        if not app_id:
            raise RuntimeError(
                "RAKUTEN_APP_ID is not set. Please add it to your .env file at the project root:\n"
                "RAKUTEN_APP_ID=your_application_id_here\n\n"
                "For production, set RAKUTEN_APP_ID in your deployment environment."
            )

        self.application_id = app_id
        self.category_list_url = category_list_url or os.getenv(
            "RAKUTEN_CATEGORY_LIST_URL", DEFAULT_CATEGORY_LIST_URL
        )
        self.category_ranking_url = category_ranking_url or os.getenv(
            "RAKUTEN_CATEGORY_RANKING_URL", DEFAULT_CATEGORY_RANKING_URL
        )
        if timeout is None:
            timeout = get_float_env("RAKUTEN_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
        self.timeout = timeout
        self.session = session

    def fetch_category_type(self, category_type: str) -> Dict[str, CategoryRecord]:
        """
        Fetch all categories of one type from the CategoryList endpoint.

        Args:
            category_type: "large", "medium" or "small"

        Returns:
            Mapping of category id (string) to CategoryRecord. Empty if the
            payload lacks result.<category_type>.

        Raises:
            ValueError: If category_type is not a known type.
            TransportError: On network failure or non-2xx status.
            ParseError: On a non-JSON body or an entry without categoryId.
        """
        if category_type not in VALID_CATEGORY_TYPES:
            raise ValueError(
                f"Invalid category type: '{category_type}'. Valid types: {', '.join(sorted(VALID_CATEGORY_TYPES))}"
            )

        params = {"categoryType": category_type}
        payload = self._get_json(self.category_list_url, params, label=f"category list ({category_type})")

        result = payload.get("result")
        entries = result.get(category_type) if isinstance(result, dict) else None
        if not isinstance(entries, list):
            logger.warning(
                "Rakuten category list: 'result' or '%s' key has an unexpected format: %s",
                category_type,
                str(payload)[:200],
            )
            return {}

        categories: Dict[str, CategoryRecord] = {}
        for entry in entries:
            if not isinstance(entry, dict) or entry.get("categoryId") is None:
                raise ParseError(
                    f"Category list entry without categoryId for type '{category_type}': {str(entry)[:100]}"
                )
            record = CategoryRecord(
                id=entry["categoryId"],
                parent_id=entry.get("parentCategoryId"),
                name=str(entry.get("categoryName") or ""),
            )
            categories[record.id] = record

        logger.info("Rakuten category list: loaded %d %s categories", len(categories), category_type)
        return categories

    def fetch_ranking(self, full_category_id: str) -> List[RecipeRecord]:
        """
        Fetch the ranked recipes for a "large-medium-small" category path.

        Returns:
            List of RecipeRecord (at most the upstream page size, currently 4).
            Empty if result is missing or not a list.

        Raises:
            TransportError: On network failure or non-2xx status.
            ParseError: On a non-JSON body or a ranking entry that is not an object.
        """
        params = {"categoryId": full_category_id}
        payload = self._get_json(self.category_ranking_url, params, label="category ranking")

        result = payload.get("result")
        if not isinstance(result, list):
            logger.warning(
                "Rakuten ranking: 'result' key has an unexpected format for category %s: %s",
                full_category_id,
                str(payload)[:200],
            )
            return []

        recipes: List[RecipeRecord] = []
        for item in result:
            if not isinstance(item, dict):
                raise ParseError(f"Ranking entry is not an object: {str(item)[:100]}")
            recipes.append(normalize_recipe(item))

        logger.debug("Rakuten ranking: %d recipes for category %s", len(recipes), full_category_id)
        return recipes

    def _get_json(self, url: str, params: Dict[str, str], label: str) -> Dict[str, Any]:
        """Issue a GET request and return the decoded JSON object."""
        query = {"applicationId": self.application_id, "format": "json", **params}
        display_url = redact_url(url, params)
        logger.info("Rakuten %s request: %s", label, display_url)

        # requests/urllib3 errors embed the raw URL (with applicationId), so they
        # are neither logged nor chained; only the redacted URL leaves this method.
        http = self.session or requests
        try:
            response = http.get(url, params=query, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.error("Rakuten %s request timed out after %ss: %s", label, self.timeout, display_url)
            raise TransportError(
                f"Request to Rakuten {label} timed out after {self.timeout}s", url=display_url
            ) from None
        except requests.exceptions.RequestException as e:
            error_name = type(e).__name__
            logger.error("Rakuten %s request failed: %s (%s)", label, display_url, error_name)
            raise TransportError(
                f"Request to Rakuten {label} failed: {error_name} for {display_url}", url=display_url
            ) from None

        if not 200 <= response.status_code < 300:
            body = self._redact(response.text or "")
            logger.error(
                "Rakuten %s request failed: HTTP %d url=%s body=%s",
                label,
                response.status_code,
                display_url,
                body[:200],
            )
            raise TransportError(
                f"API request failed: HTTP error code: {response.status_code}, Response: {body}",
                url=display_url,
                status_code=response.status_code,
                body=body,
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Rakuten %s returned invalid JSON: %s", label, display_url)
            raise ParseError(f"Invalid JSON from Rakuten {label}: {e}", url=display_url) from e

        if not isinstance(payload, dict):
            raise ParseError(
                f"Unexpected JSON from Rakuten {label}: expected an object, got {type(payload).__name__}",
                url=display_url,
            )
        return payload

    def _redact(self, text: str) -> str:
        """Mask the application id if the upstream echoes it back."""
        return text.replace(self.application_id, "***")


def normalize_recipe(item: Dict[str, Any]) -> RecipeRecord:
    """
    Map a raw ranking entry to a RecipeRecord.

    Fallbacks:
    - recipeTitle -> "(unknown)"
    - foodImageUrl -> mediumImageUrl -> ""
    - recipeDescription -> "No description."
    - recipeMaterial must be a list, otherwise the ingredients are unknown
    - recipeUrl -> ""

    Examples:
        >>> normalize_recipe({"recipeMaterial": ["egg", "flour"]}).ingredients_text
        'egg、flour'
    """
    title = _text(item, "recipeTitle")
    image_url = _text(item, "foodImageUrl")
    if image_url is None:
        image_url = _text(item, "mediumImageUrl")
    description = _text(item, "recipeDescription")
    materials = item.get("recipeMaterial")
    recipe_url = _text(item, "recipeUrl")

    return RecipeRecord(
        title=title if title is not None else UNKNOWN_TITLE,
        image_url=image_url if image_url is not None else "",
        description=description if description is not None else NO_DESCRIPTION,
        ingredients=[str(m) for m in materials] if isinstance(materials, list) else [],
        ingredients_known=isinstance(materials, list),
        url=recipe_url if recipe_url is not None else "",
    )


def redact_url(url: str, params: Dict[str, str]) -> str:
    """Build the request URL for logs with the application id masked."""
    query = {"applicationId": "***", "format": "json", **params}
    return requests.Request("GET", url, params=query).prepare().url


def _text(item: Dict[str, Any], key: str) -> Optional[str]:
    value = item.get(key)
    if value is None:
        return None
    return str(value)
