from __future__ import annotations

from typing import Optional

__all__ = ("get_directive",)

DIRECTIVE_SEPARATOR = ","
VALUE_SEPARATOR = "="


def _left_boundary_ok(header_value: str, index: int) -> bool:
    # start of header, "," or a single space that follows "," or starts the header
    if index == 0:
        return True
    before = header_value[index - 1]
    if before == DIRECTIVE_SEPARATOR:
        return True
    if before == " ":
        return index == 1 or header_value[index - 2] == DIRECTIVE_SEPARATOR
    return False


def get_directive(header_value: str, name: str) -> Optional[str]:
    """
    Gets the value of a single Cache-Control directive.

    The directive name has to be a whole token: it must start the header or
    follow a "," (optionally with one space in between), and it must be
    followed by "=", "," or the end of the header.

    Examples:

        get_directive("no-cache, max-age=0", "max-age") -> "0"
        get_directive("no-cache, max-age=0", "no-cache") -> "no-cache"
        get_directive("no-cache, max-age=0", "bogus") -> None

    When an occurrence has a valid left boundary but is followed by anything
    else ("max-age-extended=5"), the lookup stops and returns None instead of
    looking for a later occurrence.

    :param header_value: Raw Cache-Control header value
    :type header_value: str
    :param name: Name of the directive to look up
    :type name: str
    :return: The directive value, the name itself for valueless directives, or None
    :rtype: Optional[str]
    """
    if not name:
        return None

    start = header_value.find(name)

    while start != -1:
        if not _left_boundary_ok(header_value, start):
            start = header_value.find(name, start + 1)
            continue

        end = start + len(name)
        if end == len(header_value) or header_value[end] == DIRECTIVE_SEPARATOR:
            return name
        if header_value[end] != VALUE_SEPARATOR:
            return None

        value_start = end + len(VALUE_SEPARATOR)
        value_end = header_value.find(DIRECTIVE_SEPARATOR, value_start)
        if value_end == -1:
            value_end = len(header_value)
        return header_value[value_start:value_end]

    return None
