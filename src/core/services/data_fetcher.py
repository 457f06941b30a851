"""
Data fetcher service — keeps one consumer's view of a remote collection.

A DataFetcher owns the lifecycle of a single "fetch a resource" operation:
- Tracks loading/error/data as an immutable FetchState
- Runs each fetch as an asyncio task tagged with a generation number
- Discards results of superseded fetches
- Notifies subscribers on every state change

It is the recovery boundary for ApiClient failures: consumers only
ever see a user-facing message in ``state.error``, never an exception.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from src.core.primitives.api_client import ApiClient, ApiResult
from src.core.primitives.exceptions import EmptyResultError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "/catalog"

LOAD_ERROR_MESSAGE = "Could not retrieve data catalog. Please check network connection."
EMPTY_RESULT_MESSAGE = "The endpoint returned no items."


@dataclass(frozen=True)
class FetchState:
    """Read-only snapshot exposed to consumers."""

    data: list[Any] | None = None
    loading: bool = False
    error: str | None = None
    generation: int = 0

    @property
    def is_idle(self) -> bool:
        return self.generation == 0 and not self.loading

    @property
    def succeeded(self) -> bool:
        return self.data is not None


StateListener = Callable[[FetchState], None]


class DataFetcher:
    """
    Fetches a collection for one consumer and exposes it as FetchState.

    Usage:
        fetcher = DataFetcher(client, "/catalog")
        unsubscribe = fetcher.subscribe(render)
        fetcher.start()

        # later
        fetcher.refetch()
        state = await fetcher.wait()

    Or as an async context manager, which starts on enter and closes on exit:
        async with DataFetcher(client, "/catalog") as fetcher:
            state = await fetcher.wait()
    """

    def __init__(
        self,
        client: ApiClient | None,
        endpoint: str = DEFAULT_ENDPOINT,
        fallback_data: Sequence[Any] | None = None,
        parser: Callable[[Any], Any] | None = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            client: ApiClient used for network fetches.
            endpoint: Endpoint to fetch, relative to the client's base URL.
            fallback_data: Offline dataset served instead of calling the API.
            parser: Optional callable applied to every raw item.
        """
        if client is None and fallback_data is None:
            raise ValueError("DataFetcher needs a client or fallback_data")

        self._client = client
        self._endpoint = endpoint
        self._fallback_data = fallback_data
        self._parser = parser

        self._state = FetchState()
        self._generation = 0
        self._listeners: list[StateListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._current: asyncio.Task | None = None
        self._failure: Exception | None = None
        self._started = False
        self._closed = False

    # -------------------------------------------------------------------------
    # Read-only view
    # -------------------------------------------------------------------------

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def data(self) -> list[Any] | None:
        return self._state.data

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def failure(self) -> Exception | None:
        """Underlying cause of the current Failure state, for diagnostics."""
        return self._failure

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with every new FetchState.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> asyncio.Task | None:
        """Begin the first fetch. Later calls are no-ops."""
        if self._started:
            return self._current
        self._started = True
        return self.refetch()

    def refetch(self) -> asyncio.Task | None:
        """
        Start a new fetch, superseding any fetch still in flight.

        Must be called from within a running event loop.

        Returns:
            The task running the new fetch, or None after close().
        """
        if self._closed:
            logger.debug(f"Ignoring refetch of {self._endpoint}: fetcher is closed")
            return None

        self._started = True
        self._generation += 1
        generation = self._generation
        self._failure = None

        self._set_state(FetchState(loading=True, generation=generation))

        task = asyncio.create_task(self._run(generation, self._endpoint))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._current = task
        return task

    def set_endpoint(self, endpoint: str) -> asyncio.Task | None:
        """Change the endpoint; refetches if it differs and the fetcher is started."""
        if endpoint == self._endpoint:
            return None
        self._endpoint = endpoint
        if not self._started:
            return None
        return self.refetch()

    async def wait(self) -> FetchState:
        """Wait until the latest fetch has settled and return the state."""
        while self._current is not None and not self._current.done():
            task = self._current
            await task
            if task is self._current:
                break
        return self._state

    def close(self) -> None:
        """Tear down: pending results are discarded and listeners dropped."""
        self._closed = True
        self._generation += 1
        self._listeners.clear()
        if self._tasks:
            logger.debug(
                f"Closing fetcher for {self._endpoint} "
                f"with {len(self._tasks)} pending fetch(es)"
            )

    async def __aenter__(self) -> "DataFetcher":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Fetch
    # -------------------------------------------------------------------------

    async def _run(self, generation: int, endpoint: str) -> None:
        """Perform one fetch and publish its outcome if still current."""
        try:
            result = await self._load(endpoint)
        except Exception as e:
            # Failures outside the ApiError taxonomy still end in Failure
            logger.error(f"Unexpected error fetching data from {endpoint}: {e!r}", exc_info=True)
            self._fail(generation, e, LOAD_ERROR_MESSAGE)
            return

        if not result.ok:
            logger.error(f"Error fetching data from {endpoint}: {result.error!r}")
            self._fail(generation, result.error, LOAD_ERROR_MESSAGE)
            return

        items = self._extract_items(result.value)
        if items is None:
            logger.error(
                f"Error fetching data from {endpoint}: "
                f"unexpected payload type {type(result.value).__name__}"
            )
            self._fail(generation, None, LOAD_ERROR_MESSAGE)
            return

        if not items:
            logger.warning(f"Empty result from {endpoint}")
            self._fail(generation, EmptyResultError(endpoint), EMPTY_RESULT_MESSAGE)
            return

        if self._parser is not None:
            try:
                items = [self._parser(item) for item in items]
            except Exception as e:
                logger.error(f"Cannot parse items from {endpoint}: {e!r}", exc_info=True)
                self._fail(generation, e, LOAD_ERROR_MESSAGE)
                return

        logger.info(f"Fetched {len(items)} item(s) from {endpoint}")
        self._resolve(generation, FetchState(data=items, generation=generation))

    async def _load(self, endpoint: str) -> ApiResult:
        if self._fallback_data is not None:
            # Yield once so offline fetches resolve asynchronously like real ones
            await asyncio.sleep(0)
            return ApiResult(value=list(self._fallback_data))

        return await self._client.execute(endpoint)

    @staticmethod
    def _extract_items(raw: Any) -> list[Any] | None:
        """Accept a bare list or a paged envelope with a ``data`` list.

        None, an empty object and an envelope whose ``data`` is empty or
        null all count as an empty collection.
        """
        if isinstance(raw, dict):
            if not raw:
                return []
            if "data" in raw:
                raw = raw["data"]
        if raw is None:
            return []
        if not isinstance(raw, list):
            return None
        return raw

    def _fail(self, generation: int, cause: Exception | None, message: str) -> None:
        self._resolve(generation, FetchState(error=message, generation=generation), cause)

    def _resolve(
        self,
        generation: int,
        state: FetchState,
        failure: Exception | None = None,
    ) -> None:
        if generation != self._generation:
            logger.debug(
                f"Discarding stale result for {self._endpoint} "
                f"(generation {generation}, current {self._generation})"
            )
            return
        self._failure = failure
        self._set_state(state)

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"State listener failed: {e}", exc_info=True)
