# storescrape/scraping/urls.py

"""Best-effort conversion of scraped links into absolute URLs."""

from urllib.parse import urlsplit


def resolve_url(base_url: str, candidate: str) -> str:
    """Make *candidate* absolute relative to the page at *base_url*.

    Rules, first match wins:

    1. Already starts with ``http`` -> returned unchanged.
    2. Protocol-relative ``//host/path`` -> ``https:`` prefixed.
    3. Root-relative ``/path`` -> scheme and host of *base_url* + path,
       or *candidate* unchanged when *base_url* has no scheme/host.
    4. Anything else -> *base_url* without trailing slashes + ``/`` +
       candidate.

    ``..`` segments, query strings and fragments are not normalised.
    """
    if candidate.startswith("http"):
        return candidate
    if candidate.startswith("//"):
        return f"https:{candidate}"
    if candidate.startswith("/"):
        try:
            parts = urlsplit(base_url)
            host = parts.hostname
        except ValueError:
            return candidate
        if not parts.scheme or not host:
            return candidate
        return f"{parts.scheme}://{host}{candidate}"
    return f"{base_url.rstrip('/')}/{candidate}"
