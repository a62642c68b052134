"""CGI program that adds the two numbers in QUERY_STRING."""

from __future__ import annotations

import os
import re
import sys

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    """Parse a leading decimal integer, giving 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def render(query_string: str | None) -> str:
    """Build the CGI response (headers and body) for ``query_string``.

    ``None`` means no query string was given, and both numbers are 0.
    Raises ValueError when a query string has no ``&`` separator.
    """
    n1 = n2 = 0
    if query_string is not None:
        first, sep, second = query_string.partition("&")
        if not sep:
            raise ValueError(f"query string has no '&' separator: {query_string!r}")
        n1 = _atoi(first)
        n2 = _atoi(second)

    content = (
        "Welcome to add.com: "
        "THE Internet addition portal.\r\n<p>"
        f"The answer is: {n1} + {n2} = {n1 + n2}\r\n<p>"
        "Thanks for visiting!\r\n"
    )
    return (
        "Connection: close\r\n"
        f"Content-length: {len(content.encode())}\r\n"
        "Content-type: text/html\r\n\r\n"
        f"{content}"
    )


def main(argv: list[str] | None = None) -> int:
    """CGI entry point: read QUERY_STRING and write the response to stdout."""
    try:
        response = render(os.environ.get("QUERY_STRING"))
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    sys.stdout.write(response)
    sys.stdout.flush()
    return 0