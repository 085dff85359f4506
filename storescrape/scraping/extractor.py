# storescrape/scraping/extractor.py

"""Map parsed store pages to :class:`ProductRecord` objects."""

import logging

from bs4 import BeautifulSoup, Tag

from storescrape.models.product import ProductRecord
from storescrape.models.store import StoreProfile
from storescrape.scraping.errors import SelectorError
from storescrape.scraping.selectors import (
    SELECTOR_FAILURES,
    extract_attribute,
    extract_text,
)
from storescrape.scraping.urls import resolve_url

logger = logging.getLogger("storescrape.extractor")

PARSER = "lxml"


def parse_document(markup: str) -> BeautifulSoup:
    """Parse raw HTML with the project-wide parser."""
    return BeautifulSoup(markup, PARSER)


def extract_record(
    scope: Tag, profile: StoreProfile, page_url: str,
) -> ProductRecord | None:
    """Build one record from *scope*, or None if name/price are missing."""
    name = extract_text(scope, profile.name_selector)
    price = extract_text(scope, profile.price_selector)
    if name is None or price is None:
        return None

    href = extract_attribute(scope, profile.link_selector, "href")
    src = extract_attribute(scope, profile.image_selector, "src")

    description = None
    if profile.description_selector:
        description = extract_text(scope, profile.description_selector)

    return ProductRecord(
        name=name,
        price=price,
        url=resolve_url(page_url, href) if href is not None else page_url,
        image_url=resolve_url(page_url, src) if src is not None else "",
        store_name=profile.name,
        description=description,
    )


def extract_all(
    markup: str, profile: StoreProfile, page_url: str,
) -> list[ProductRecord]:
    """Extract every complete product container on a listing page.

    Containers lacking a name or a price are dropped. An unparseable
    container selector raises :class:`SelectorError`.
    """
    if not profile.container_selector:
        logger.warning(
            "[%s] No container selector configured", profile.name
        )
        return []

    soup = parse_document(markup)
    try:
        containers = soup.select(profile.container_selector)
    except SELECTOR_FAILURES as exc:
        raise SelectorError(profile.container_selector, str(exc)) from exc

    records: list[ProductRecord] = []
    for container in containers:
        record = extract_record(container, profile, page_url)
        if record is not None:
            records.append(record)

    dropped = len(containers) - len(records)
    logger.debug(
        "[%s] %d containers matched, %d records, %d dropped",
        profile.name,
        len(containers),
        len(records),
        dropped,
    )
    return records


def extract_one(
    markup: str, profile: StoreProfile, page_url: str,
) -> ProductRecord | None:
    """Extract a single product from a detail page's document root."""
    return extract_record(parse_document(markup), profile, page_url)
