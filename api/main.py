"""
FastAPI application for the Random Dish Picker.

This module defines the web endpoints:
- GET /: HTML page showing the load status, or the ready prompt and button
- POST /api/generateDish: pick a random recipe from a random small category
- GET /health: health check with category load status

At startup the lifespan hook starts a single background thread that loads the
Rakuten category tables. Until that finishes, /api/generateDish answers 503
with the current status message.

Run the app with:
    uvicorn api.main:app --reload
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from api.config import RakutenConfig, configure_logging, validate_required_config
from api.schemas import DishResponse, HealthResponse
from dishpicker.connectors.base import BaseConnector
from dishpicker.connectors.rakuten_connector import RakutenRecipeConnector
from dishpicker.selector import DishSelector, SelectorErrorKind
from dishpicker.state import AppState

logger = logging.getLogger(__name__)

APP_NAME = "Random Dish Picker"
APP_VERSION = "1.0.0"

TEMPLATES = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

EMPTY_CATEGORY_MESSAGE = "No dishes in this category ({path}). Try again!"
PATH_ERROR_MESSAGE = "Could not build category path. Try again!"
GENERATION_ERROR_MESSAGE = "An error occurred while generating a dish."


def build_connector() -> RakutenRecipeConnector:
    """
    Build the Rakuten connector from environment configuration.

    Raises:
        RuntimeError: If RAKUTEN_APP_ID is missing (fatal at startup)
    """
    validate_required_config()
    return RakutenRecipeConnector(
        application_id=RakutenConfig.get_application_id(),
        category_list_url=RakutenConfig.get_category_list_url(),
        category_ranking_url=RakutenConfig.get_category_ranking_url(),
        timeout=RakutenConfig.get_timeout(),
    )


def create_app(
    connector: Optional[BaseConnector] = None,
    state: Optional[AppState] = None,
    start_loader: bool = True,
    request_interval: Optional[float] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        connector: Recipe API connector (optional, built from environment at startup)
        state: Shared AppState (optional, a fresh one is created)
        start_loader: Whether the lifespan hook starts the background category load
        request_interval: Pause between category list calls (optional, from RAKUTEN_REQUEST_INTERVAL_SECONDS)

    Returns:
        Configured FastAPI application
    """
    configure_logging()
    app_state = state or AppState()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.connector is None:
            app.state.connector = build_connector()
            app.state.selector = DishSelector(app_state, app.state.connector)
        if start_loader:
            interval = request_interval if request_interval is not None else RakutenConfig.get_request_interval()
            app_state.start_background_load(app.state.connector, request_interval=interval)
            logger.info("Category loader started")
        yield

    app = FastAPI(
        title=f"{APP_NAME} API",
        description="Shows a random recipe from the Rakuten Recipe category rankings",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.dish_state = app_state
    app.state.connector = connector
    app.state.selector = DishSelector(app_state, connector) if connector is not None else None
    app.state.started_at = time.time()

    @app.get("/", response_class=HTMLResponse, tags=["page"])
    def show_dish_page(request: Request, state: AppState = Depends(get_app_state)):
        """
        Render the main page.

        Shows the current status message while loading or after a failed load, and
        the ready prompt with the "get a dish" button once categories are loaded.
        """
        load_state = state.load_state
        return TEMPLATES.TemplateResponse(
            request,
            "index.html",
            {
                "dish_name": load_state.message,
                "ready": load_state.is_ready,
                "load_status": load_state.status.value,
            },
        )

    @app.post(
        "/api/generateDish",
        response_model=DishResponse,
        tags=["dish"],
        summary="Pick a random dish",
        responses={
            404: {"model": DishResponse, "description": "The chosen category had no ranked dishes"},
            500: {"model": DishResponse, "description": "Category path or upstream error"},
            503: {"model": DishResponse, "description": "Category data not loaded yet (or load failed)"},
        },
    )
    def generate_dish(
        state: AppState = Depends(get_app_state),
        selector: Optional[DishSelector] = Depends(get_selector),
    ) -> JSONResponse:
        """
        Pick a random dish and map the outcome to an HTTP status.

        Returns:
            200 with the recipe fields on success
            404 if the chosen category had no ranked dishes (retryable)
            500 if the category path could not be built or the upstream call failed
            503 while categories are loading or after a failed load
        """
        load_state = state.load_state
        if not load_state.is_ready or selector is None:
            return _dish_json(DishResponse.message(load_state.message), status.HTTP_503_SERVICE_UNAVAILABLE)

        try:
            selection = selector.pick_random_dish()
        except Exception as e:
            logger.exception("Unexpected error while generating a dish: %s", e)
            return _dish_json(DishResponse.message(GENERATION_ERROR_MESSAGE), status.HTTP_500_INTERNAL_SERVER_ERROR)

        if selection.ok:
            return _dish_json(DishResponse.from_recipe(selection.recipe), status.HTTP_200_OK)

        if selection.error == SelectorErrorKind.NOT_READY:
            return _dish_json(DishResponse.message(selection.message), status.HTTP_503_SERVICE_UNAVAILABLE)
        if selection.error == SelectorErrorKind.EMPTY_CATEGORY:
            return _dish_json(
                DishResponse.message(EMPTY_CATEGORY_MESSAGE.format(path=selection.category_path)),
                status.HTTP_404_NOT_FOUND,
            )
        if selection.error == SelectorErrorKind.PATH_RESOLUTION:
            return _dish_json(DishResponse.message(PATH_ERROR_MESSAGE), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return _dish_json(DishResponse.message(GENERATION_ERROR_MESSAGE), status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    def health(request: Request, state: AppState = Depends(get_app_state)) -> HealthResponse:
        """
        Health check endpoint.

        Always returns 200 if the endpoint is reachable; load_status tells whether
        dishes can be served.
        """
        load_state = state.load_state
        store = state.store
        return HealthResponse(
            name=APP_NAME,
            version=APP_VERSION,
            load_status=load_state.status.value,
            message=load_state.message,
            medium_categories=len(store.medium) if store else 0,
            small_categories=len(store.small) if store else 0,
            uptime_seconds=int(time.time() - request.app.state.started_at),
        )

    return app


def get_app_state(request: Request) -> AppState:
    return request.app.state.dish_state


def get_selector(request: Request) -> Optional[DishSelector]:
    return request.app.state.selector


def _dish_json(body: DishResponse, status_code: int) -> JSONResponse:
    return JSONResponse(content=body.model_dump(by_alias=True), status_code=status_code)


app = create_app()
