from __future__ import annotations

import logging
import types
import typing as tp
from contextlib import AsyncExitStack

import anyio
import httpx

from ._controller import Controller
from ._directives import get_directive
from ._exceptions import InvalidIntervalError, InvalidResourceError
from ._models import CachedResponse, FetchOptions
from ._storages import BaseStorage, InMemoryStorage
from ._sweeper import DEFAULT_CLEANUP_INTERVAL, Sweeper
from ._transports import HTTPXSender, Sender
from ._utils import generate_key

if tp.TYPE_CHECKING:  # pragma: no cover
    from typing_extensions import Self

logger = logging.getLogger("memfetch.fetcher")

__all__ = ("AsyncCacheFetcher",)


class AsyncCacheFetcher:
    """
    Fetches resources while keeping fresh responses in memory.

    Each fetcher owns its storage, controller and sweeper, so several
    independent caches can live in the same process. The background sweep
    runs while the fetcher is used as an async context manager.

    :param sender: Async callable that performs the actual request, defaults to None
    :type sender: tp.Optional[Sender], optional
    :param storage: Storage for the cached responses, defaults to None
    :type storage: tp.Optional[BaseStorage], optional
    :param controller: Controller that makes the caching decisions, defaults to None
    :type controller: tp.Optional[Controller], optional
    :param cleanup_interval: Seconds between two background sweeps, defaults to 10
    :type cleanup_interval: float, optional
    """

    get_directive = staticmethod(get_directive)

    def __init__(
        self,
        sender: tp.Optional[Sender] = None,
        storage: tp.Optional[BaseStorage] = None,
        controller: tp.Optional[Controller] = None,
        cleanup_interval: float = DEFAULT_CLEANUP_INTERVAL,
    ) -> None:
        self._sender = sender if sender is not None else HTTPXSender()
        self._storage = storage if storage is not None else InMemoryStorage()

        if not isinstance(self._storage, BaseStorage):  # pragma: no cover
            raise TypeError(f"Expected subclass of `BaseStorage` but got `{storage.__class__.__name__}`")

        self._controller = controller if controller is not None else Controller()
        self._sweeper = Sweeper(self._storage, self._controller, interval=cleanup_interval)
        self._exit_stack: tp.Optional[AsyncExitStack] = None

    @property
    def storage(self) -> BaseStorage:
        return self._storage

    @property
    def controller(self) -> Controller:
        return self._controller

    @property
    def sweeper(self) -> Sweeper:
        return self._sweeper

    @property
    def cleanup_interval(self) -> float:
        return self._sweeper.interval

    @cleanup_interval.setter
    def cleanup_interval(self, interval: float) -> None:
        try:
            self._sweeper.reschedule(interval)
        except InvalidIntervalError as exc:
            logger.error(f"{exc} Keeping the current interval of {self._sweeper.interval} seconds.")

    async def fetch(self, resource: str, options: tp.Optional[FetchOptions] = None) -> httpx.Response:
        """
        Fetches a resource, serving it from the cache when a fresh copy is stored.

        Errors raised by the sender are propagated unchanged and nothing is
        stored for them.

        :param resource: Resource to fetch, usually a URL
        :type resource: str
        :param options: Request options passed to the sender, defaults to None
        :type options: tp.Optional[FetchOptions], optional
        :return: The response
        :rtype: httpx.Response
        """
        if not resource:
            raise InvalidResourceError(f"({resource!r}) is an invalid resource to fetch.")

        options = options if options is not None else FetchOptions()
        key = generate_key(resource, options)
        stored = self._storage.retrieve(key)

        if stored is not None:
            if not self._controller.is_expired(stored.headers):
                logger.debug(f"Serving {resource} from the cache, stored at {stored.stored_at}.")
                return stored.to_response(request=self._build_request(resource, options))
            logger.debug(f"The cached response for {resource} is stale, fetching it again.")
        else:
            logger.debug(f"No cached response for {resource}, fetching it.")

        response = await self._sender(resource, options)
        response.extensions["from_cache"] = False  # type: ignore[index]
        await self._maybe_store(key, resource, response)
        return response

    def _build_request(self, resource: str, options: FetchOptions) -> tp.Optional[httpx.Request]:
        try:
            return httpx.Request(
                options.get("method", "GET"),
                resource,
                headers=options.get("headers"),
                params=options.get("params"),
            )
        except httpx.InvalidURL:
            logger.debug(f"{resource} is not a valid URL, the cached response is returned without a request.")
            return None

    async def _maybe_store(self, key: str, resource: str, response: httpx.Response) -> None:
        if not self._controller.is_cachable(response.headers):
            return

        # Read errors belong to the transport and reach the caller unchanged.
        await response.aread()

        try:
            self._storage.store(key, CachedResponse.from_response(response, stored_at=self._controller.clock.now()))
            logger.debug(f"Stored the response for {resource} in the cache.")
        except Exception:
            logger.exception(f"Could not store the response for {resource} in the cache.")

    def cleanup(self) -> tp.List[str]:
        """
        Removes every expired response right away.

        :return: Keys of the removed responses
        :rtype: tp.List[str]
        """
        return self._sweeper.sweep()

    def clear_cache(self, options: tp.Optional[FetchOptions] = None) -> None:
        self._storage.clear_matching(options=options)

    def clear_all_cache(self) -> None:
        self._storage.clear()

    async def aclose(self) -> None:
        close = getattr(self._sender, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> Self:
        async with AsyncExitStack() as stack:
            task_group = await stack.enter_async_context(anyio.create_task_group())
            self._sweeper.start(task_group)
            stack.callback(self._sweeper.stop)
            self._exit_stack = stack.pop_all()
        return self

    async def __aexit__(
        self,
        exc_type: tp.Optional[tp.Type[BaseException]] = None,
        exc_value: tp.Optional[BaseException] = None,
        traceback: tp.Optional[types.TracebackType] = None,
    ) -> None:
        try:
            if self._exit_stack is not None:
                exit_stack, self._exit_stack = self._exit_stack, None
                await exit_stack.__aexit__(exc_type, exc_value, traceback)
        finally:
            await self.aclose()
