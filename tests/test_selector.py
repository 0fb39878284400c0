"""
Tests for DishSelector.pick_random_dish outcomes.
"""

from unittest.mock import Mock

import pytest

from dishpicker.categories import CategoryStore
from dishpicker.errors import TransportError
from dishpicker.models import CategoryRecord, RecipeRecord
from dishpicker.selector import DishSelector, SelectorErrorKind
from dishpicker.state import AppState


class FirstChoice:
    """Deterministic random source: always picks the first element."""

    def choice(self, seq):
        return seq[0]

    def shuffle(self, items):
        pass


def ready_state(small_ids=("101", "102"), small=None):
    state = AppState()
    state.random = FirstChoice()
    medium = {"10": CategoryRecord(id="10", parent_id="1")}
    if small is None:
        small = {small_id: CategoryRecord(id=small_id, parent_id="10") for small_id in small_ids}
    state.publish_ready(CategoryStore(medium=medium, small=small, small_ids=small_ids))
    return state


class TestPickRandomDish:
    """Tests for each DishSelection outcome."""

    def test_not_ready_never_calls_gateway(self):
        connector = Mock()
        selection = DishSelector(AppState(), connector).pick_random_dish()

        assert selection.error == SelectorErrorKind.NOT_READY
        assert selection.message == "Loading category data..."
        assert not selection.ok
        connector.fetch_ranking.assert_not_called()

    def test_failed_load_is_not_ready(self):
        state = AppState()
        state.publish_failure("HTTP error code: 500")
        connector = Mock()

        selection = DishSelector(state, connector).pick_random_dish()

        assert selection.error == SelectorErrorKind.NOT_READY
        connector.fetch_ranking.assert_not_called()

    def test_success_returns_recipe(self):
        connector = Mock()
        connector.fetch_ranking.return_value = [RecipeRecord(title="Soup"), RecipeRecord(title="Stew")]

        selection = DishSelector(ready_state(), connector).pick_random_dish()

        assert selection.ok
        assert selection.recipe.title == "Soup"
        assert selection.small_category_id == "101"
        assert selection.category_path == "1-10-101"
        connector.fetch_ranking.assert_called_once_with("1-10-101")

    def test_empty_ranking_is_empty_category(self):
        connector = Mock()
        connector.fetch_ranking.return_value = []

        selection = DishSelector(ready_state(), connector).pick_random_dish()

        assert selection.error == SelectorErrorKind.EMPTY_CATEGORY
        assert selection.category_path == "1-10-101"

    def test_unresolvable_path(self):
        small = {"101": CategoryRecord(id="101", parent_id="77")}
        connector = Mock()

        selection = DishSelector(ready_state(small_ids=("101",), small=small), connector).pick_random_dish()

        assert selection.error == SelectorErrorKind.PATH_RESOLUTION
        assert selection.small_category_id == "101"
        connector.fetch_ranking.assert_not_called()

    def test_gateway_error_is_upstream(self):
        connector = Mock()
        connector.fetch_ranking.side_effect = TransportError("HTTP error code: 503", status_code=503)

        selection = DishSelector(ready_state(), connector).pick_random_dish()

        assert selection.error == SelectorErrorKind.UPSTREAM
        assert "503" in selection.message

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_seeded_selection_is_reproducible(self, seed):
        def pick():
            state = AppState(seed=seed)
            medium = {"10": CategoryRecord(id="10", parent_id="1")}
            small = {i: CategoryRecord(id=i, parent_id="10") for i in ("101", "102", "103")}
            state.publish_ready(CategoryStore(medium=medium, small=small))
            connector = Mock()
            connector.fetch_ranking.return_value = [RecipeRecord(title=t) for t in ("A", "B", "C")]
            selection = DishSelector(state, connector).pick_random_dish()
            return selection.small_category_id, selection.recipe.title

        assert pick() == pick()
