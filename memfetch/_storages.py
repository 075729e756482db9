from __future__ import annotations

import logging
import threading
import typing as tp

from ._models import CachedResponse

logger = logging.getLogger("memfetch.storages")

__all__ = ("BaseStorage", "InMemoryStorage")

StoredEntry = tp.Tuple[str, CachedResponse]


class BaseStorage:
    def store(self, key: str, entry: CachedResponse) -> None:
        raise NotImplementedError()

    def retrieve(self, key: str) -> tp.Optional[CachedResponse]:
        raise NotImplementedError()

    def remove(self, key: str) -> None:
        raise NotImplementedError()

    def entries(self) -> tp.List[StoredEntry]:
        raise NotImplementedError()

    def evict(self, predicate: tp.Callable[[CachedResponse], bool]) -> tp.List[str]:
        raise NotImplementedError()

    def clear(self) -> None:
        raise NotImplementedError()

    def clear_matching(self, resource: tp.Optional[str] = None, options: tp.Optional[tp.Any] = None) -> None:
        raise NotImplementedError(
            "Clearing only the entries that match a resource or a set of options is not implemented yet. "
            "Use `clear()` to drop every stored response."
        )


class InMemoryStorage(BaseStorage):
    """
    A simple in-memory storage.

    Entries are kept for the lifetime of the storage object. Every operation
    holds a lock, so the storage can be shared between event loop tasks and
    threads; readers always get their own copy of a stored response.
    """

    def __init__(self) -> None:
        self._cache: tp.Dict[str, CachedResponse] = {}
        self._lock = threading.Lock()

    def store(self, key: str, entry: CachedResponse) -> None:
        """
        Stores the response in the cache, replacing any previous entry for the key.

        :param key: Fingerprint of the request
        :type key: str
        :param entry: A response snapshot
        :type entry: CachedResponse
        """

        with self._lock:
            self._cache[key] = entry.clone()

    def retrieve(self, key: str) -> tp.Optional[CachedResponse]:
        """
        Retreives the response from the cache using its key.

        :param key: Fingerprint of the request
        :type key: str
        :return: A copy of the stored response, or None
        :rtype: tp.Optional[CachedResponse]
        """

        with self._lock:
            entry = self._cache.get(key)
            return entry.clone() if entry is not None else None

    def remove(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def entries(self) -> tp.List[StoredEntry]:
        with self._lock:
            return [(key, entry.clone()) for key, entry in self._cache.items()]

    def evict(self, predicate: tp.Callable[[CachedResponse], bool]) -> tp.List[str]:
        """
        Removes every entry matching the predicate in a single locked pass.

        :return: Keys of the removed entries
        :rtype: tp.List[str]
        """

        with self._lock:
            keys_to_remove = [key for key, entry in self._cache.items() if predicate(entry)]

            for key in keys_to_remove:
                del self._cache[key]

        if keys_to_remove:
            logger.debug(f"Evicted {len(keys_to_remove)} entries from the in-memory storage.")
        return keys_to_remove

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._cache
