import logging
import typing as tp

from ._directives import get_directive
from ._utils import BaseClock, Clock, parse_date, parse_delta_seconds

logger = logging.getLogger("memfetch.controller")

__all__ = ("Controller", "is_expired", "should_cache")

HeadersLike = tp.Mapping[str, str]


def get_expiration_time(headers: HeadersLike) -> tp.Optional[float]:
    """
    Computes the moment a response stops being fresh according to its
    Cache-Control max-age directive and its Date header.

    A missing max-age directive counts as zero. Returns None when either
    header is missing or a value cannot be interpreted.
    """
    cache_control = headers.get("Cache-Control")
    date = headers.get("Date")

    if not cache_control or not date:
        return None

    date_timestamp = parse_date(date)
    if date_timestamp is None:
        return None

    max_age_value = get_directive(cache_control, "max-age")
    if max_age_value is None:
        return date_timestamp

    max_age = parse_delta_seconds(max_age_value)
    if max_age is None:
        return None
    return date_timestamp + max_age


def is_expired(headers: HeadersLike, reference_time: float) -> bool:
    # A response expiring exactly at the reference time is still usable.
    expiration_time = get_expiration_time(headers)
    if expiration_time is not None and expiration_time < reference_time:
        return True

    expires = headers.get("Expires")
    if expires:
        expires_timestamp = parse_date(expires)
        if expires_timestamp is not None and expires_timestamp < reference_time:
            return True

    return False


def should_cache(headers: HeadersLike, reference_time: float) -> bool:
    cache_control = headers.get("Cache-Control")

    if cache_control:
        if get_directive(cache_control, "no-cache") == "no-cache":
            return False
        if get_directive(cache_control, "no-store") == "no-store":
            return False

        max_age_value = get_directive(cache_control, "max-age")
        if max_age_value is not None and parse_delta_seconds(max_age_value) == 0:
            return False
        return True

    expires = headers.get("Expires")
    if expires:
        expires_timestamp = parse_date(expires)
        return expires_timestamp is not None and expires_timestamp > reference_time

    return False


class Controller:
    """
    Makes the caching decisions for stored and incoming responses.

    :param clock: Source of the reference time used when none is passed explicitly, defaults to None
    :type clock: tp.Optional[BaseClock], optional
    """

    def __init__(self, clock: tp.Optional[BaseClock] = None) -> None:
        self._clock = clock if clock else Clock()

    @property
    def clock(self) -> BaseClock:
        return self._clock

    def is_expired(self, headers: HeadersLike, now: tp.Optional[float] = None) -> bool:
        """
        Determines whether a stored response can no longer be served.
        """
        reference_time = self._clock.now() if now is None else now
        expired = is_expired(headers, reference_time)

        if expired:
            logger.debug(
                (
                    "Considering the stored response as expired since its freshness lifetime "
                    f"ended before {reference_time}."
                )
            )
        return expired

    def is_cachable(self, headers: HeadersLike, now: tp.Optional[float] = None) -> bool:
        """
        Determines whether an incoming response may be stored.

        The response is cachable unless its Cache-Control header contains
        no-cache, no-store or max-age=0. Without a Cache-Control header the
        response is cachable only if its Expires header lies in the future.
        """
        reference_time = self._clock.now() if now is None else now
        cachable = should_cache(headers, reference_time)

        if cachable:
            logger.debug("Considering the response as cachable since it carries an explicit caching signal.")
        elif headers.get("Cache-Control"):
            logger.debug(
                (
                    "Considering the response as not cachable since its Cache-Control header "
                    f"({headers.get('Cache-Control')}) forbids storing it."
                )
            )
        else:
            logger.debug(
                "Considering the response as not cachable since it does not contain "
                "a Cache-Control header or a future Expires header."
            )
        return cachable
