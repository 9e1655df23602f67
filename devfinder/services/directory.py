"""Fetch lifecycle for the developer directory.

State lives in an immutable :class:`FetchState` that only changes through
:func:`reduce`. :class:`FetchOrchestrator` owns one state per browsing
session, turns user triggers into listing queries and feeds the outcomes
back through the reducer.

Every query gets a monotonically increasing ``request_id``. Completion
events carrying anything but the latest id are discarded, so a slow,
superseded query can never overwrite the result of a newer one.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Hashable, Iterator, Union

from devfinder.domain.models import PriceBucket, ServiceProvider
from devfinder.filters import FilterSpec, build_filter
from devfinder.logging import logger
from devfinder.services.listings import ListingService
from devfinder.services.notifications import (
    LoggingNotificationSink,
    NotificationSink,
    format_fetch_error,
)


class FetchStatus(str, Enum):
    idle = "idle"
    loading = "loading"
    success = "success"
    error = "error"


@dataclass(frozen=True, slots=True)
class FetchState:
    status: FetchStatus = FetchStatus.idle
    results: tuple[ServiceProvider, ...] = ()
    error_message: str | None = None
    request_id: int = 0
    filter: FilterSpec | None = None
    in_flight: int = 0

    @property
    def is_loading(self) -> bool:
        return self.status is FetchStatus.loading

    @property
    def is_empty(self) -> bool:
        return self.status is FetchStatus.success and not self.results


@dataclass(frozen=True, slots=True)
class QueryStarted:
    request_id: int
    filter: FilterSpec


@dataclass(frozen=True, slots=True)
class QuerySucceeded:
    request_id: int
    results: tuple[ServiceProvider, ...]


@dataclass(frozen=True, slots=True)
class QueryFailed:
    request_id: int
    message: str


@dataclass(frozen=True, slots=True)
class QuerySettled:
    request_id: int


FetchEvent = Union[QueryStarted, QuerySucceeded, QueryFailed, QuerySettled]

CANCELLED_MESSAGE = "cancelled"


def reduce(state: FetchState, event: FetchEvent) -> FetchState:
    if isinstance(event, QueryStarted):
        return replace(
            state,
            status=FetchStatus.loading,
            error_message=None,
            request_id=event.request_id,
            filter=event.filter,
            in_flight=state.in_flight + 1,
        )
    if isinstance(event, QuerySettled):
        in_flight = max(state.in_flight - 1, 0)
        if event.request_id == state.request_id and state.status is FetchStatus.loading:
            # The latest query ended without an outcome (cancelled).
            return replace(
                state,
                status=FetchStatus.error,
                error_message=CANCELLED_MESSAGE,
                in_flight=in_flight,
            )
        return replace(state, in_flight=in_flight)
    if event.request_id != state.request_id:
        return state
    if isinstance(event, QuerySucceeded):
        available = tuple(provider for provider in event.results if provider.is_available)
        return replace(state, status=FetchStatus.success, results=available, error_message=None)
    if isinstance(event, QueryFailed):
        # Previously displayed results are kept alongside the error.
        return replace(state, status=FetchStatus.error, error_message=event.message)
    raise TypeError(f"Unknown fetch event: {event!r}")


StateListener = Callable[[FetchState], None]


class FetchOrchestrator:
    def __init__(
        self,
        listing_service: ListingService,
        notifier: NotificationSink | None = None,
        *,
        session_key: Hashable | None = None,
    ) -> None:
        self._listing_service = listing_service
        self._notifier = notifier or LoggingNotificationSink()
        self._session_key = session_key
        self._state = FetchState()
        self._last_request_id = 0
        self._listeners: list[StateListener] = []
        self.text_query = ""
        self.price_bucket: PriceBucket | None = None

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def activated(self) -> bool:
        return self._last_request_id > 0

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def current_filter(self) -> FilterSpec:
        return build_filter(self.text_query, self.price_bucket)

    async def activate(self) -> FetchState:
        if self.activated:
            return self._state
        return await self.run_query(self.current_filter())

    def set_text_query(self, text: str | None) -> None:
        self.text_query = text or ""

    async def search(self, text: str | None = None) -> FetchState:
        if text is not None:
            self.set_text_query(text)
        return await self.run_query(self.current_filter())

    async def select_price_bucket(self, bucket: PriceBucket | str | None) -> FetchState:
        self.price_bucket = PriceBucket(bucket) if bucket else None
        return await self.run_query(self.current_filter())

    async def run_query(self, filter_spec: FilterSpec) -> FetchState:
        self._last_request_id += 1
        request_id = self._last_request_id
        self._dispatch(QueryStarted(request_id, filter_spec))

        with self._in_flight(request_id):
            try:
                providers = await self._listing_service.query_listings(filter_spec)
            except Exception as exc:
                message = str(exc) or exc.__class__.__name__
                await self._fail(request_id, message, exc)
            else:
                self._complete(request_id, QuerySucceeded(request_id, tuple(providers)))
        return self._state

    @contextlib.contextmanager
    def _in_flight(self, request_id: int) -> Iterator[None]:
        try:
            yield
        finally:
            self._dispatch(QuerySettled(request_id))

    def _complete(self, request_id: int, event: FetchEvent) -> bool:
        if request_id != self._last_request_id:
            logger.info(
                "fetch_result_discarded",
                session=self._session_key,
                request_id=request_id,
                latest_request_id=self._last_request_id,
            )
            return False
        self._dispatch(event)
        return True

    async def _fail(self, request_id: int, message: str, exc: Exception) -> None:
        logger.warning(
            "listing_query_failed",
            session=self._session_key,
            request_id=request_id,
            error=message,
            exception_type=exc.__class__.__name__,
        )
        if self._complete(request_id, QueryFailed(request_id, message)):
            await self._notifier.notify_error(format_fetch_error(message))

    def _dispatch(self, event: FetchEvent) -> None:
        self._state = reduce(self._state, event)
        for listener in list(self._listeners):
            listener(self._state)


OrchestratorFactory = Callable[[Hashable], FetchOrchestrator]


class DirectorySessions:
    """One orchestrator per browsing session (a Telegram chat, a web tab...)."""

    def __init__(self, factory: OrchestratorFactory) -> None:
        self._factory = factory
        self._sessions: dict[Hashable, FetchOrchestrator] = {}

    def get(self, key: Hashable) -> FetchOrchestrator:
        orchestrator = self._sessions.get(key)
        if orchestrator is None:
            orchestrator = self._factory(key)
            self._sessions[key] = orchestrator
        return orchestrator

    def drop(self, key: Hashable) -> None:
        self._sessions.pop(key, None)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = [
    "CANCELLED_MESSAGE",
    "DirectorySessions",
    "FetchEvent",
    "FetchOrchestrator",
    "FetchState",
    "FetchStatus",
    "QueryFailed",
    "QuerySettled",
    "QueryStarted",
    "QuerySucceeded",
    "reduce",
]
