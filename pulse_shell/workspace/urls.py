"""Address-bar URL rules.

Whatever the user types into the omnibox is turned into something a browser
tab can load: a full URL is kept, a bare host gets ``https://``, and anything
that looks like a phrase becomes a search-engine query.
"""

from __future__ import annotations

import re
from urllib.parse import quote, urlsplit

SEARCH_ROOT = "https://duckduckgo.com"
SEARCH_QUERY_URL = f"{SEARCH_ROOT}/?q="
FALLBACK_TAB_TITLE = "New Tab"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z\d+\-.]*://")

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_.~".
_QUERY_SAFE = "!*'()"


def normalize_url(value: str) -> str:
    """Turn omnibox input into a loadable URL.

    - blank input maps to the search root
    - input with a ``scheme://`` prefix passes through (trimmed)
    - input with a space, or without any ``.``, becomes a search query
    - anything else is treated as a bare host and gets ``https://``
    """
    trimmed = value.strip()
    if not trimmed:
        return SEARCH_ROOT

    if _SCHEME_RE.match(trimmed):
        return trimmed

    if " " in trimmed or "." not in trimmed:
        return SEARCH_QUERY_URL + quote(trimmed, safe=_QUERY_SAFE)

    return f"https://{trimmed}"


def title_from_url(value: str) -> str:
    """Derive a tab title from the URL host, without a leading ``www.``."""
    try:
        hostname = urlsplit(value).hostname
    except ValueError:
        return FALLBACK_TAB_TITLE
    if not hostname:
        return FALLBACK_TAB_TITLE
    return hostname.removeprefix("www.")
