# storescrape/models/store.py

"""Store profiles and the ordered collection that holds them."""

import logging
from collections.abc import Iterator
from dataclasses import asdict, dataclass, replace
from typing import Any
from urllib.parse import quote_plus

from storescrape.scraping.errors import (
    DuplicateStoreError,
    InvalidProfileError,
)
from storescrape.scraping.selectors import FieldKind, check_selector

logger = logging.getLogger("storescrape.stores")

DEFAULT_SEARCH_PATTERN = "{base_url}/search?q={query}"


@dataclass
class StoreProfile:
    """Scraping configuration for one target site."""

    name: str
    base_url: str
    search_url_pattern: str = DEFAULT_SEARCH_PATTERN
    container_selector: str = ""
    name_selector: str = ""
    price_selector: str = ""
    image_selector: str = ""
    link_selector: str = ""
    description_selector: str | None = None
    enabled: bool = True

    def missing_fields(self) -> list[str]:
        """Names of required fields that are blank."""
        required = {
            "name": self.name,
            "base_url": self.base_url,
            "container_selector": self.container_selector,
            "name_selector": self.name_selector,
            "price_selector": self.price_selector,
        }
        return [key for key, value in required.items() if not value.strip()]

    def is_valid(self) -> bool:
        """True when name, base URL, container, name and price are set."""
        return not self.missing_fields()

    def require_valid(self) -> None:
        """Raise :class:`InvalidProfileError` if a required field is blank."""
        missing = self.missing_fields()
        if missing:
            raise InvalidProfileError(self.name, missing)

    def validate(self) -> None:
        """Strict check used before a profile is stored.

        Raises :class:`InvalidProfileError` for blank required fields and
        :class:`~storescrape.scraping.errors.SelectorError` for the first
        configured selector that does not compile.
        """
        self.require_valid()
        required = [
            self.container_selector,
            self.name_selector,
            self.price_selector,
        ]
        optional = [
            self.image_selector,
            self.link_selector,
            self.description_selector or "",
        ]
        for selector in required:
            check_selector(selector)
        for selector in optional:
            if selector.strip():
                check_selector(selector)

    def build_search_url(self, query: str) -> str:
        """Fill the search pattern with the base URL and encoded query.

        The query is percent-encoded, so placeholder text inside it
        (``{query}``, ``{base_url}``) cannot be substituted again.
        """
        return self.search_url_pattern.replace(
            "{base_url}", self.base_url
        ).replace("{query}", quote_plus(query))

    def with_selector(self, kind: FieldKind, selector: str) -> "StoreProfile":
        """Copy of this profile with the *kind* selector replaced."""
        if kind is FieldKind.CONTAINER:
            return replace(self, container_selector=selector)
        if kind is FieldKind.TITLE:
            return replace(self, name_selector=selector)
        if kind is FieldKind.PRICE:
            return replace(self, price_selector=selector)
        if kind is FieldKind.IMAGE:
            return replace(self, image_selector=selector)
        if kind is FieldKind.LINK:
            return replace(self, link_selector=selector)
        if kind is FieldKind.DESCRIPTION:
            return replace(self, description_selector=selector or None)
        raise ValueError(f"Unhandled field kind: {kind!r}")

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoreProfile":
        """Build a profile from a dict produced by :meth:`to_dict`."""
        description = data.get("description_selector")
        return cls(
            name=str(data.get("name", "")),
            base_url=str(data.get("base_url", "")),
            search_url_pattern=str(
                data.get("search_url_pattern", DEFAULT_SEARCH_PATTERN)
            ),
            container_selector=str(data.get("container_selector", "")),
            name_selector=str(data.get("name_selector", "")),
            price_selector=str(data.get("price_selector", "")),
            image_selector=str(data.get("image_selector", "")),
            link_selector=str(data.get("link_selector", "")),
            description_selector=(
                str(description) if description else None
            ),
            enabled=bool(data.get("enabled", True)),
        )


class StoreCollection:
    """Ordered store profiles with unique names.

    Mutation goes through :meth:`add`, :meth:`update` and :meth:`remove`
    only. Names are compared after stripping surrounding whitespace.
    """

    def __init__(self, stores: list[StoreProfile] | None = None) -> None:
        self._stores: list[StoreProfile] = []
        # Construction trusts persisted data; only add/update run validate()
        for store in stores or []:
            self._check_name_free(store.name)
            self._stores.append(store)

    def __len__(self) -> int:
        return len(self._stores)

    def __iter__(self) -> Iterator[StoreProfile]:
        return iter(list(self._stores))

    def __getitem__(self, index: int) -> StoreProfile:
        return self._stores[index]

    @property
    def stores(self) -> list[StoreProfile]:
        """Snapshot of the profiles in order."""
        return list(self._stores)

    def _check_name_free(self, name: str, skip_index: int = -1) -> None:
        key = name.strip()
        for idx, store in enumerate(self._stores):
            if idx != skip_index and store.name.strip() == key:
                raise DuplicateStoreError(key)

    def add(self, store: StoreProfile) -> None:
        """Append a validated profile with a name not yet in use."""
        store.validate()
        self._check_name_free(store.name)
        self._stores.append(store)
        logger.info("Added store '%s'", store.name)

    def update(self, index: int, store: StoreProfile) -> bool:
        """Replace the profile at *index*; False if out of range."""
        if not 0 <= index < len(self._stores):
            return False
        store.validate()
        self._check_name_free(store.name, skip_index=index)
        self._stores[index] = store
        logger.info("Updated store #%d ('%s')", index, store.name)
        return True

    def remove(self, index: int) -> StoreProfile | None:
        """Remove and return the profile at *index*; None if out of range."""
        if not 0 <= index < len(self._stores):
            return None
        removed = self._stores.pop(index)
        logger.info("Removed store '%s'", removed.name)
        return removed

    def index_of(self, name: str) -> int | None:
        """Position of the profile called *name*, or None."""
        key = name.strip()
        for idx, store in enumerate(self._stores):
            if store.name.strip() == key:
                return idx
        return None

    def find(self, name: str) -> StoreProfile | None:
        """Profile with the given name, or None."""
        index = self.index_of(name)
        return self._stores[index] if index is not None else None

    def enabled(self) -> list[StoreProfile]:
        """Enabled profiles in list order."""
        return [store for store in self._stores if store.enabled]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict."""
        return {"stores": [store.to_dict() for store in self._stores]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoreCollection":
        """Rebuild a collection; names must still be unique."""
        return cls(
            [StoreProfile.from_dict(item) for item in data.get("stores", [])]
        )

    @classmethod
    def default(cls) -> "StoreCollection":
        """Collection seeded with a single example store."""
        return cls([
            StoreProfile(
                name="Example Store",
                base_url="https://example.com",
                container_selector=".product-item",
                name_selector=".product-name",
                price_selector=".price",
                image_selector=".product-image img",
                link_selector="a",
                description_selector=".description",
            ),
        ])
