from __future__ import annotations

import typing as tp
from dataclasses import dataclass, field, replace

import httpx

__all__ = ("CachedResponse", "FetchOptions")

# The stored body is already decoded, and its length is recomputed on replay.
NON_REPLAYABLE_HEADERS = ("content-encoding", "content-length")


class FetchOptions(tp.TypedDict, total=False):
    method: str
    """HTTP method, GET when omitted."""

    headers: tp.Union[tp.Mapping[str, str], tp.Sequence[tp.Tuple[str, str]]]
    params: tp.Mapping[str, tp.Any]
    content: tp.Union[str, bytes]
    json: tp.Any


@dataclass(frozen=True)
class CachedResponse:
    """
    An immutable snapshot of a response, replayable any number of times.
    """

    status_code: int
    headers: httpx.Headers
    content: bytes
    stored_at: float = field(default=0.0, compare=False)

    @classmethod
    def from_response(cls, response: httpx.Response, stored_at: float = 0.0) -> "CachedResponse":
        """
        Captures an already read response.

        :param response: A response whose body was read with `aread` or `read`
        :type response: httpx.Response
        :param stored_at: Timestamp of the capture, defaults to 0.0
        :type stored_at: float, optional
        """
        headers = httpx.Headers(
            [
                (key, value)
                for key, value in response.headers.multi_items()
                if key.lower() not in NON_REPLAYABLE_HEADERS
            ]
        )
        return cls(
            status_code=response.status_code,
            headers=headers,
            content=response.content,
            stored_at=stored_at,
        )

    def clone(self) -> "CachedResponse":
        return replace(self, headers=httpx.Headers(self.headers))

    def to_response(self, request: tp.Optional[httpx.Request] = None) -> httpx.Response:
        """
        Builds a fresh response from the snapshot.

        :param request: Request to attach, so that `raise_for_status` and `url` work on the copy, defaults to None
        :type request: tp.Optional[httpx.Request], optional
        """
        return httpx.Response(
            status_code=self.status_code,
            headers=httpx.Headers(self.headers),
            content=self.content,
            request=request,
            extensions={"from_cache": True, "stored_at": self.stored_at},
        )
