from __future__ import annotations

import types
import typing as tp

import httpx

from ._models import FetchOptions

if tp.TYPE_CHECKING:  # pragma: no cover
    from typing_extensions import Self

__all__ = ("HTTPXSender", "Sender")

Sender = tp.Callable[[str, FetchOptions], tp.Awaitable[httpx.Response]]


class HTTPXSender:
    """
    Sends requests through an `httpx.AsyncClient`.

    :param client: Client used to send the requests, defaults to None.
        A client created by the sender is closed by `aclose`; a client passed in is left open.
    :type client: tp.Optional[httpx.AsyncClient], optional
    """

    def __init__(self, client: tp.Optional[httpx.AsyncClient] = None) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    async def __call__(self, resource: str, options: FetchOptions) -> httpx.Response:
        return await self._client.request(
            options.get("method", "GET"),
            resource,
            headers=options.get("headers"),
            params=options.get("params"),
            content=options.get("content"),
            json=options.get("json"),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: tp.Optional[tp.Type[BaseException]] = None,
        exc_value: tp.Optional[BaseException] = None,
        traceback: tp.Optional[types.TracebackType] = None,
    ) -> None:
        await self.aclose()
