"""
Shared application state for the dish picker.

AppState owns everything request handlers read:
- the LoadState (LOADING -> READY | FAILED, terminal)
- the CategoryStore published by the loader
- a lock-guarded random source shared by concurrent requests

Exactly one writer exists: the background loader started by
start_background_load(). It publishes its outcome once; later publishes are
ignored. Request handlers only read.
"""

import logging
import random
import threading
import time
from typing import Callable, List, Optional, Sequence, TypeVar

from dishpicker.categories import CategoryStore, REQUEST_INTERVAL_SECONDS, load_category_store
from dishpicker.connectors.base import BaseConnector
from dishpicker.errors import DishPickerError
from dishpicker.models import LoadState, LoadStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

READY_MESSAGE = "Press the button to get a dish!"
FAILED_MESSAGE_PREFIX = "Category load error."


class LockedRandom:
    """random.Random wrapper that serializes access across request threads."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def choice(self, seq: Sequence[T]) -> T:
        with self._lock:
            return self._random.choice(seq)

    def shuffle(self, items: List[T]) -> None:
        with self._lock:
            self._random.shuffle(items)


class AppState:
    """
    Load state, category store and random source shared across requests.

    Args:
        seed: Optional seed for the random source (deterministic tests)
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.random = LockedRandom(seed)
        self._lock = threading.Lock()
        self._loaded = threading.Event()
        self._load_state = LoadState()
        self._store: Optional[CategoryStore] = None
        self._loader: Optional[threading.Thread] = None

    @property
    def load_state(self) -> LoadState:
        with self._lock:
            return self._load_state

    @property
    def store(self) -> Optional[CategoryStore]:
        """The published CategoryStore, or None unless READY."""
        with self._lock:
            return self._store

    def publish_ready(self, store: CategoryStore) -> bool:
        """Publish a loaded store. Returns False if a result was already published."""
        with self._lock:
            if self._load_state.status != LoadStatus.LOADING:
                logger.warning("Ignoring category store publish: state is already %s", self._load_state.status.value)
                return False
            self._store = store
            self._load_state = LoadState(status=LoadStatus.READY, message=READY_MESSAGE)
        self._loaded.set()
        return True

    def publish_failure(self, detail: str) -> bool:
        """Publish a failed load. Returns False if a result was already published."""
        with self._lock:
            if self._load_state.status != LoadStatus.LOADING:
                logger.warning("Ignoring load failure publish: state is already %s", self._load_state.status.value)
                return False
            self._load_state = LoadState(
                status=LoadStatus.FAILED,
                message=f"{FAILED_MESSAGE_PREFIX} Details: {detail}",
            )
        self._loaded.set()
        return True

    def load_categories(
        self,
        connector: BaseConnector,
        request_interval: float = REQUEST_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> LoadState:
        """
        Run the category load synchronously and publish its outcome.

        Any error ends the load attempt in the FAILED state; there is no retry.
        """
        try:
            store = load_category_store(
                connector,
                shuffle=self.random.shuffle,
                request_interval=request_interval,
                sleep=sleep,
            )
        except DishPickerError as e:
            logger.error(
                "Error while loading category data: %s (url=%s status=%s)", e, e.url, e.status_code
            )
            self.publish_failure(str(e))
        except Exception as e:
            logger.exception("Unexpected error while loading category data: %s", e)
            self.publish_failure(str(e))
        else:
            logger.info("Category data loaded. Small categories: %d", len(store))
            self.publish_ready(store)
        return self.load_state

    def start_background_load(
        self,
        connector: BaseConnector,
        request_interval: float = REQUEST_INTERVAL_SECONDS,
    ) -> threading.Thread:
        """
        Start the one-shot loader thread. Calling it again returns the same thread.
        """
        with self._lock:
            if self._loader is None:
                self._loader = threading.Thread(
                    target=self.load_categories,
                    args=(connector, request_interval),
                    name="category-loader",
                    daemon=True,
                )
                self._loader.start()
            return self._loader

    def wait_until_loaded(self, timeout: Optional[float] = None) -> bool:
        """Block until the load reaches READY or FAILED. Returns False on timeout."""
        return self._loaded.wait(timeout)
