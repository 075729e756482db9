__all__ = ("MemfetchError", "InvalidResourceError", "InvalidIntervalError")


class MemfetchError(Exception): ...


class InvalidResourceError(MemfetchError, ValueError): ...


class InvalidIntervalError(MemfetchError, ValueError): ...
