import typing as tp
from types import TracebackType

import anyio
import httpx

from ._models import FetchOptions

if tp.TYPE_CHECKING:  # pragma: no cover
    from typing_extensions import Self

__all__ = ("MockAsyncSender",)


class MockAsyncSender:
    """
    A sender that replays scripted responses instead of touching the network.

    Responses are handed out in the order they were added. An exception
    instance added in place of a response is raised when its turn comes.
    """

    def __init__(self, delay: float = 0) -> None:
        self.mocked_responses: tp.List[tp.Union[httpx.Response, BaseException]] = []
        self.calls: tp.List[tp.Tuple[str, FetchOptions]] = []
        self.delay = delay

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def __call__(self, resource: str, options: FetchOptions) -> httpx.Response:
        self.calls.append((resource, options))
        if self.delay:
            await anyio.sleep(self.delay)
        mocked = self.mocked_responses.pop(0)
        if isinstance(mocked, BaseException):
            raise mocked
        return mocked

    def add_responses(self, responses: tp.List[tp.Union[httpx.Response, BaseException]]) -> None:
        self.mocked_responses.extend(responses)

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> "Self":
        return self

    async def __aexit__(
        self,
        exc_type: tp.Optional[tp.Type[BaseException]] = None,
        exc_value: tp.Optional[BaseException] = None,
        traceback: tp.Optional[TracebackType] = None,
    ) -> None: ...
