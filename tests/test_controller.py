import logging

import pytest
from freezegun import freeze_time
from httpx import Headers

from memfetch import Controller, is_expired, should_cache
from memfetch._controller import get_expiration_time
from memfetch._utils import parse_date

DATE = "Mon, 25 Aug 2015 12:00:00 GMT"
DATE_TIMESTAMP = 1440504000.0


def test_expiration_time_from_max_age():
    headers = Headers({"Cache-Control": "max-age=60", "Date": DATE})

    assert get_expiration_time(headers) == DATE_TIMESTAMP + 60


def test_expiration_time_without_max_age_is_the_date():
    headers = Headers({"Cache-Control": "public", "Date": DATE})

    assert get_expiration_time(headers) == DATE_TIMESTAMP


def test_expiration_time_needs_both_headers():
    assert get_expiration_time(Headers({"Cache-Control": "max-age=60"})) is None
    assert get_expiration_time(Headers({"Date": DATE})) is None


def test_expiration_time_with_flag_max_age():
    headers = Headers({"Cache-Control": "max-age", "Date": DATE})

    assert get_expiration_time(headers) is None


@pytest.mark.parametrize(
    "reference_offset, expected",
    [
        (59, False),
        (60, False),
        (61, True),
    ],
)
def test_is_expired_max_age(reference_offset, expected):
    headers = Headers({"Cache-Control": "max-age=60", "Date": DATE})

    assert is_expired(headers, DATE_TIMESTAMP + reference_offset) is expected


def test_is_expired_past_expires_without_cache_control():
    headers = Headers({"Expires": DATE})

    assert is_expired(headers, DATE_TIMESTAMP + 1)
    assert not is_expired(headers, DATE_TIMESTAMP)


def test_is_expired_checks_both_sources():
    # max-age keeps the response fresh, but Expires has already passed
    headers = Headers(
        {
            "Cache-Control": "max-age=3600",
            "Date": DATE,
            "Expires": DATE,
        }
    )

    assert is_expired(headers, DATE_TIMESTAMP + 10)


def test_is_expired_without_information():
    assert not is_expired(Headers({}), DATE_TIMESTAMP)
    assert not is_expired(Headers({"Cache-Control": "max-age=60"}), DATE_TIMESTAMP + 1000)


def test_is_expired_with_invalid_dates():
    headers = Headers({"Cache-Control": "max-age=60", "Date": "yesterday", "Expires": "never"})

    assert not is_expired(headers, DATE_TIMESTAMP)


@pytest.mark.parametrize("cache_control", ["no-store", "no-cache", "max-age=0", "public, no-cache, max-age=60"])
def test_should_not_cache(cache_control):
    headers = Headers({"Cache-Control": cache_control})

    assert not should_cache(headers, DATE_TIMESTAMP)


@pytest.mark.parametrize("reference_time", [0.0, DATE_TIMESTAMP, DATE_TIMESTAMP * 2])
def test_should_cache_max_age(reference_time):
    headers = Headers({"Cache-Control": "max-age=60"})

    assert should_cache(headers, reference_time)


def test_should_cache_ignores_expires_when_cache_control_present():
    headers = Headers({"Cache-Control": "no-store", "Expires": "Mon, 25 Aug 2030 12:00:00 GMT"})

    assert not should_cache(headers, DATE_TIMESTAMP)


def test_should_cache_future_expires():
    headers = Headers({"Expires": DATE})

    assert should_cache(headers, DATE_TIMESTAMP - 1)
    assert not should_cache(headers, DATE_TIMESTAMP)


def test_should_not_cache_without_signal():
    assert not should_cache(Headers({"Content-Type": "text/plain"}), DATE_TIMESTAMP)


def test_should_not_cache_invalid_expires():
    assert not should_cache(Headers({"Expires": "0"}), DATE_TIMESTAMP)


def test_partial_token_does_not_disable_caching():
    headers = Headers({"Cache-Control": "no-store-please, max-age=60"})

    assert should_cache(headers, DATE_TIMESTAMP)


def test_controller_uses_its_clock(clock_at):
    controller = Controller(clock=clock_at(DATE_TIMESTAMP + 61))
    headers = Headers({"Cache-Control": "max-age=60", "Date": DATE})

    assert controller.is_expired(headers)
    assert not controller.is_expired(headers, now=DATE_TIMESTAMP)


@freeze_time("Mon, 25 Aug 2015 12:00:30 GMT")
def test_controller_default_clock():
    controller = Controller()

    assert not controller.is_expired(Headers({"Cache-Control": "max-age=60", "Date": DATE}))
    assert controller.is_expired(Headers({"Cache-Control": "max-age=10", "Date": DATE}))


@freeze_time("Mon, 25 Aug 2015 12:00:00 GMT")
def test_controller_is_cachable_with_expires():
    controller = Controller()

    assert controller.is_cachable(Headers({"Expires": "Mon, 25 Aug 2015 12:00:01 GMT"}))
    assert not controller.is_cachable(Headers({"Expires": DATE}))


def test_controller_logs_decisions(caplog, clock_at):
    controller = Controller(clock=clock_at(DATE_TIMESTAMP))

    with caplog.at_level(logging.DEBUG, logger="memfetch.controller"):
        controller.is_cachable(Headers({"Cache-Control": "no-store"}))

    assert "not cachable" in caplog.text
    assert "no-store" in caplog.text


def test_date_constant():
    assert parse_date(DATE) == DATE_TIMESTAMP
