import pytest

from memfetch import AsyncCacheFetcher, get_directive


def test_directive_with_value():
    assert get_directive("no-cache, max-age=0", "max-age") == "0"


def test_directive_without_value():
    assert get_directive("no-cache, max-age=0", "no-cache") == "no-cache"


def test_missing_directive():
    assert get_directive("no-cache, max-age=0", "bogus") is None


def test_partial_token_is_rejected():
    assert get_directive("max-age-extended=5", "max-age") is None


def test_directive_at_the_end():
    assert get_directive("public, no-store", "no-store") == "no-store"


def test_directive_without_space_after_comma():
    assert get_directive("public,max-age=60", "max-age") == "60"


def test_value_is_not_trimmed():
    assert get_directive("max-age=60 , public", "max-age") == "60 "


def test_value_runs_until_the_end():
    assert get_directive("public, max-age=3600", "max-age") == "3600"


def test_empty_value():
    assert get_directive("max-age=, public", "max-age") == ""


def test_suffix_match_keeps_searching():
    assert get_directive("s-max-age=10, max-age=5", "max-age") == "5"


def test_occurrence_inside_a_value_keeps_searching():
    assert get_directive('private="max-age", max-age=7', "max-age") == "7"


def test_malformed_occurrence_stops_the_search():
    # the first occurrence with a valid left boundary decides the outcome
    assert get_directive("max-age-extended=5, max-age=3", "max-age") is None


def test_space_without_comma_is_not_a_boundary():
    assert get_directive("public max-age=3", "max-age") is None


def test_single_leading_space():
    assert get_directive(" max-age=3", "max-age") == "3"


@pytest.mark.parametrize("header_value", ["", ",", ", ,"])
def test_empty_headers(header_value):
    assert get_directive(header_value, "max-age") is None


def test_empty_name():
    assert get_directive("no-cache", "") is None


def test_fetcher_exposes_directive_lookup():
    assert AsyncCacheFetcher.get_directive("no-cache, max-age=0", "max-age") == "0"
