from __future__ import annotations

import calendar
import hashlib
import json
import re
import time
import typing as tp
from email.utils import parsedate_tz

_DELTA_SECONDS = re.compile(r"\s*([+-]?\d+)")


class BaseClock:
    def now(self) -> float:
        raise NotImplementedError()


class Clock(BaseClock):
    def now(self) -> float:
        return time.time()


def parse_date(date: str) -> tp.Optional[float]:
    """
    Converts an HTTP-date into a POSIX timestamp.

    Returns None when the value cannot be parsed, so that callers can treat
    a malformed date the same way as a missing one.
    """
    parsed = parsedate_tz(date)
    if parsed is None:
        return None
    timestamp = calendar.timegm(parsed[:6])
    return float(timestamp - (parsed[9] or 0))


def parse_delta_seconds(value: str) -> tp.Optional[int]:
    """
    Reads the leading integer of a directive value.

    Leading whitespace and trailing garbage are tolerated ("60 " and "60abc"
    both give 60); a value with no leading digits gives None.
    """
    match = _DELTA_SECONDS.match(value)
    if match is None:
        return None
    return int(match.group(1))


def _canonical(value: tp.Any) -> tp.Any:
    if isinstance(value, (bytes, bytearray)):
        return {"__bytes__": bytes(value).hex()}
    if isinstance(value, tp.Mapping):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def canonical_options(options: tp.Optional[tp.Mapping[str, tp.Any]]) -> str:
    """
    Serializes request options into a stable string.

    Mapping keys are sorted at every depth and header names are lower-cased,
    so option objects that only differ in field order or header-name case
    serialize identically.
    """
    normalized = dict(options or {})
    headers = normalized.get("headers")
    if headers is not None:
        items = headers.items() if isinstance(headers, tp.Mapping) else headers
        normalized["headers"] = sorted([str(k).lower(), str(v)] for k, v in items)
    return json.dumps(_canonical(normalized), sort_keys=True, separators=(",", ":"))


def generate_key(resource: str, options: tp.Optional[tp.Mapping[str, tp.Any]] = None) -> str:
    key_parts = [resource.encode("utf-8"), b"\x00", canonical_options(options).encode("utf-8")]

    # FIPS mode disables blake2 algorithm, use sha256 instead when not found.
    blake2b_hasher = None
    sha256_hasher = hashlib.sha256()
    try:
        blake2b_hasher = hashlib.blake2b(digest_size=16)
    except (ValueError, TypeError, AttributeError):
        pass

    hexdigest: str
    if blake2b_hasher:
        for part in key_parts:
            blake2b_hasher.update(part)

        hexdigest = blake2b_hasher.hexdigest()
    else:
        for part in key_parts:
            sha256_hasher.update(part)

        hexdigest = sha256_hasher.hexdigest()
    return hexdigest
