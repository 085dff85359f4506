# storescrape/scraping/selectors.py

"""CSS selector helpers: field extraction, validation and suggestions.

Field-level lookups never raise. A blank selector means "field not
configured" and a malformed one behaves like a miss, so one typo in a
store profile costs a field, not the whole page. Use
:func:`check_selector` when a hard failure is wanted instead.
"""

import logging
from enum import Enum

import soupsieve
from bs4 import Tag
from soupsieve import SelectorSyntaxError

from storescrape.scraping.errors import SelectorError

logger = logging.getLogger("storescrape.selectors")

# soupsieve rejects pseudo-elements (``a::before``) with NotImplementedError
SELECTOR_FAILURES = (SelectorSyntaxError, NotImplementedError)


class FieldKind(Enum):
    """The selector slots of a store profile."""

    CONTAINER = "container"
    TITLE = "title"
    PRICE = "price"
    IMAGE = "image"
    LINK = "link"
    DESCRIPTION = "description"

    @classmethod
    def parse(cls, text: str) -> "FieldKind | None":
        """Map user text to a kind; ``name`` is accepted for TITLE."""
        key = text.strip().lower()
        if key == "name":
            return cls.TITLE
        for kind in cls:
            if kind.value == key:
                return kind
        return None


_SUGGESTIONS: dict[FieldKind, list[str]] = {
    FieldKind.TITLE: [
        ".product-title",
        ".product-name",
        "h1",
        "h2",
        ".title",
        "[data-testid='product-title']",
    ],
    FieldKind.PRICE: [
        ".price",
        ".product-price",
        ".current-price",
        ".sale-price",
        "[data-testid='price']",
        ".price-current",
    ],
    FieldKind.IMAGE: [
        ".product-image img",
        ".main-image img",
        "img.product-photo",
        "[data-testid='product-image'] img",
    ],
    FieldKind.LINK: [
        "a",
        ".product-link",
        "a.product-title",
        "[data-testid='product-link']",
    ],
    FieldKind.DESCRIPTION: [
        ".product-description",
        ".description",
        ".product-summary",
        "[data-testid='description']",
    ],
    FieldKind.CONTAINER: [
        ".product-item",
        ".product-card",
        ".product",
        "[data-testid='product']",
        ".search-result",
    ],
}


def suggest_selectors(kind: FieldKind | str) -> list[str]:
    """Return common CSS patterns for a field kind.

    Unknown kind strings yield an empty list.
    """
    resolved = FieldKind.parse(kind) if isinstance(kind, str) else kind
    if resolved is None:
        return []
    return list(_SUGGESTIONS[resolved])


def _first_match(scope: Tag, selector: str) -> Tag | None:
    """First descendant of *scope* matching *selector*, or None."""
    if not selector:
        return None
    try:
        return scope.select_one(selector)
    except SELECTOR_FAILURES as exc:
        logger.debug("Ignoring invalid selector '%s': %s", selector, exc)
        return None


def extract_text(scope: Tag, selector: str) -> str | None:
    """Stripped text of the first match; None if missing or blank."""
    element = _first_match(scope, selector)
    if element is None:
        return None
    text = element.get_text().strip()
    return text or None


def extract_attribute(
    scope: Tag, selector: str, attribute: str,
) -> str | None:
    """Value of *attribute* on the first match, or None."""
    element = _first_match(scope, selector)
    if element is None:
        return None
    value = element.get(attribute)
    if value is None:
        return None
    # bs4 hands multi-valued attributes (class, rel) back as lists
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def extract_texts(scope: Tag, selector: str) -> list[str]:
    """Stripped, non-empty texts of every match."""
    if not selector:
        return []
    try:
        elements = scope.select(selector)
    except SELECTOR_FAILURES as exc:
        logger.debug("Ignoring invalid selector '%s': %s", selector, exc)
        return []
    texts = (el.get_text().strip() for el in elements)
    return [text for text in texts if text]


def check_selector(selector: str) -> None:
    """Raise :class:`SelectorError` unless *selector* compiles."""
    if not selector.strip():
        raise SelectorError(selector, "selector is empty")
    try:
        soupsieve.compile(selector)
    except SELECTOR_FAILURES as exc:
        raise SelectorError(selector, str(exc)) from exc


def validate_selector(selector: str) -> bool:
    """True when *selector* is non-empty and syntactically valid."""
    try:
        check_selector(selector)
    except SelectorError:
        return False
    return True
