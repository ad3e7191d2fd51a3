"""Default link/image URI transformer.

Neutralizes executable and local-file schemes by prefixing them with "x-",
leaving the rest of the URI untouched. Attribute escaping is left to the
serializer, which escapes each attribute value exactly once.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable

UriTransformer = Callable[[str], str]

DANGEROUS_SCHEMES: frozenset[str] = frozenset({"javascript", "vbscript", "livescript", "file"})

NEUTRALIZING_PREFIX = "x-"

# Browsers ignore ASCII tab/newline anywhere in a URL, and leading C0 controls/space.
_IGNORED_CHARS_RE = re.compile(r"[\t\n\r]")
_LEADING_JUNK_RE = re.compile(r"^[\x00-\x20]+")
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")


def uri_scheme(uri: str) -> str | None:
    """Return the lowercased scheme a browser would see for `uri`, if any.

    Character references are decoded first, so "javascript&#x3A;..." is
    recognized as the javascript scheme.
    """
    value = html.unescape(uri)
    value = _IGNORED_CHARS_RE.sub("", value)
    value = _LEADING_JUNK_RE.sub("", value)
    match = _SCHEME_RE.match(value)
    if match is None:
        return None
    return match.group(1).lower()


def is_dangerous_uri(uri: str) -> bool:
    return uri_scheme(uri) in DANGEROUS_SCHEMES


def uri_transformer(uri: str | None) -> str:
    """Make `uri` inert if its scheme is dangerous.

    >>> uri_transformer('javascript:alert("foo")')
    'x-javascript:alert("foo")'
    >>> uri_transformer("https://example.com/")
    'https://example.com/'

    Applying it twice gives the same result as applying it once.
    """
    url = (uri or "").strip()
    if is_dangerous_uri(url):
        return NEUTRALIZING_PREFIX + _LEADING_JUNK_RE.sub("", url)
    return url
