"""Placeholder grammar: ``<prefix><identifier>[//<key>][//base64]``.

A provider's pattern only recognizes ``prefix + identifier`` using that
provider's identifier charset. Some charsets contain ``/`` (SSM, Secrets
Manager, base-64) and swallow the ``//key//base64`` suffix into the
capture; others (environment) stop before it. :func:`parse_placeholder`
handles both by splitting the capture on its first ``//`` and then
extending the span with a suffix scan anchored at the end of the match.

Examples::

    ssm://app/db                  -> path "app/db"
    ssm://app/db//password        -> path "app/db", key "password"
    env://CREDS//user//base64     -> path "CREDS", key "user", encoded
    base64://eyJhIjogMX0=//a      -> path "eyJhIjogMX0=", key "a"
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from secfetch.core.secrets.base import Placeholder

SEPARATOR = "//"
"""Delimiter between identifier, key and modifier segments."""

ENCODING_TOKEN = "base64"
"""Segment requesting base-64 re-encoding of the final value."""

_SEGMENT = r"[\w.\-]"
_CONTINUE_SEGMENT = re.compile(rf"{_SEGMENT}*(?://{_SEGMENT}+)*")
_NEXT_SEGMENTS = re.compile(rf"(?://{_SEGMENT}+)*")


def parse_placeholder(line: str, match: re.Match[str]) -> Placeholder:
    """Decompose one provider-pattern match into a :class:`Placeholder`.

    Args:
        line: The line the match was found in.
        match: A match of a provider pattern; group 1 is the identifier.
    """
    captured = match.group(1)
    start, end = match.span()

    if SEPARATOR in captured:
        path, _, suffix = captured.partition(SEPARATOR)
        tail = _CONTINUE_SEGMENT.match(line, end)
        suffix += tail.group(0)
    else:
        # both suffix patterns also match the empty string
        path = captured
        tail = _NEXT_SEGMENTS.match(line, end)
        suffix = tail.group(0)[len(SEPARATOR):]
    end = tail.end()

    segments = [s for s in suffix.split(SEPARATOR) if s]
    wants_encoding = ENCODING_TOKEN in segments
    target_key = SEPARATOR.join(s for s in segments if s != ENCODING_TOKEN)

    return Placeholder(
        raw=line[start:end],
        secret_path=path.strip(),
        target_key=target_key,
        wants_encoding=wants_encoding,
        start=start,
        end=end,
    )


def find_placeholders(line: str, pattern: re.Pattern[str]) -> Iterator[Placeholder]:
    """Yield non-overlapping placeholders for *pattern*, left to right.

    A regex match that starts inside the extended span of an earlier
    placeholder is skipped.
    """
    consumed = 0
    for match in pattern.finditer(line):
        if match.start() < consumed:
            continue
        placeholder = parse_placeholder(line, match)
        consumed = placeholder.end
        yield placeholder
