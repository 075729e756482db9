from ._controller import Controller as Controller, is_expired as is_expired, should_cache as should_cache
from ._directives import get_directive as get_directive
from ._exceptions import (
    InvalidIntervalError as InvalidIntervalError,
    InvalidResourceError as InvalidResourceError,
    MemfetchError as MemfetchError,
)
from ._fetcher import AsyncCacheFetcher as AsyncCacheFetcher
from ._mock import MockAsyncSender as MockAsyncSender
from ._models import CachedResponse as CachedResponse, FetchOptions as FetchOptions
from ._storages import BaseStorage as BaseStorage, InMemoryStorage as InMemoryStorage
from ._sweeper import DEFAULT_CLEANUP_INTERVAL as DEFAULT_CLEANUP_INTERVAL, Sweeper as Sweeper
from ._transports import HTTPXSender as HTTPXSender, Sender as Sender
from ._utils import BaseClock as BaseClock, Clock as Clock, generate_key as generate_key

__all__ = (
    # Fetcher
    "AsyncCacheFetcher",
    "DEFAULT_CLEANUP_INTERVAL",
    # Directives and policy
    "get_directive",
    "is_expired",
    "should_cache",
    "Controller",
    # Clocks
    "BaseClock",
    "Clock",
    # Models
    "CachedResponse",
    "FetchOptions",
    "generate_key",
    # Storages
    "BaseStorage",
    "InMemoryStorage",
    "Sweeper",
    # Senders
    "Sender",
    "HTTPXSender",
    "MockAsyncSender",
    # Exceptions
    "MemfetchError",
    "InvalidResourceError",
    "InvalidIntervalError",
)

__version__ = "0.1.0"
