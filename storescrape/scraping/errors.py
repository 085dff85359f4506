# storescrape/scraping/errors.py

"""Exception taxonomy for fetching, parsing and store configuration."""


class ScrapeError(Exception):
    """Base class for every failure that can abort a single store."""


class NetworkError(ScrapeError):
    """Connection, DNS or timeout failure while fetching a page."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Network error for {url}: {reason}")
        self.url = url
        self.reason = reason


class HttpStatusError(ScrapeError):
    """The server answered with a status outside the 2xx range."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"HTTP {status_code} for {url}")
        self.url = url
        self.status_code = status_code


class BodyReadError(ScrapeError):
    """The response payload could not be decoded as text."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Could not read body of {url}: {reason}")
        self.url = url
        self.reason = reason


class SelectorError(ScrapeError):
    """A configured CSS selector is syntactically invalid."""

    def __init__(self, selector: str, reason: str = "") -> None:
        message = f"Invalid selector '{selector}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.selector = selector


class InvalidProfileError(ScrapeError):
    """A store profile is missing one of its required fields."""

    def __init__(self, store_name: str, missing: list[str]) -> None:
        label = store_name or "<unnamed>"
        super().__init__(
            f"Store '{label}' is missing: {', '.join(missing)}"
        )
        self.store_name = store_name
        self.missing = missing


class StoreCollectionError(Exception):
    """Base class for store collection mutations that are refused."""


class DuplicateStoreError(StoreCollectionError):
    """A store with the same name already exists in the collection."""

    def __init__(self, store_name: str) -> None:
        super().__init__(f"A store named '{store_name}' already exists")
        self.store_name = store_name
