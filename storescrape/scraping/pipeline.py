# storescrape/scraping/pipeline.py

"""Fetch store pages and turn them into product records."""

import logging
import time

from curl_cffi import CurlError
from curl_cffi import requests as curl_requests

from storescrape.config.settings import Settings
from storescrape.models.app_config import AppConfig
from storescrape.models.product import ProductRecord
from storescrape.models.store import StoreProfile
from storescrape.scraping.errors import (
    BodyReadError,
    HttpStatusError,
    NetworkError,
)
from storescrape.scraping.extractor import extract_all, extract_one


class StorePipeline:
    """Fetch-and-parse pipeline shared by every store profile.

    One GET per call, no retries. Failures surface as
    :class:`~storescrape.scraping.errors.ScrapeError` subclasses so the
    caller decides whether a store is skipped or the run aborts.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        request_timeout: int | None = None,
    ) -> None:
        self.config = config if config is not None else AppConfig()
        self.settings = Settings()
        self.logger = logging.getLogger("storescrape.pipeline")
        self.session = curl_requests.Session()
        self._request_timeout: int = (
            request_timeout
            if request_timeout is not None
            else self.settings.REQUEST_TIMEOUT
        )

    def _headers(self) -> dict[str, str]:
        return {
            **self.settings.DEFAULT_HEADERS,
            "User-Agent": self.config.user_agent,
        }

    def _wait(self) -> None:
        """Sleep for the configured per-request delay."""
        delay = self.config.request_delay
        if delay > 0:
            time.sleep(delay)

    def fetch_page(self, url: str) -> str:
        """GET *url* and return its body as text.

        Raises:
            NetworkError: connection, DNS or timeout failure.
            HttpStatusError: status outside the 2xx range.
            BodyReadError: payload not decodable with its charset.
        """
        self._wait()
        self.logger.debug("GET %s", url)
        try:
            resp = self.session.get(
                url,
                headers=self._headers(),
                timeout=self._request_timeout,
            )
        except CurlError as exc:
            self.logger.warning("Request to %s failed: %s", url, exc)
            raise NetworkError(url, str(exc)) from exc

        if resp.status_code not in self.settings.SUCCESS_STATUS_RANGE:
            self.logger.warning("HTTP %d from %s", resp.status_code, url)
            raise HttpStatusError(url, resp.status_code)

        encoding = resp.encoding or self.settings.DEFAULT_ENCODING
        try:
            return resp.content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            self.logger.warning(
                "Undecodable body from %s (%s): %s", url, encoding, exc
            )
            raise BodyReadError(url, str(exc)) from exc

    def scrape_store(
        self, url: str, profile: StoreProfile,
    ) -> list[ProductRecord]:
        """Fetch a listing page and extract every product on it."""
        profile.require_valid()
        markup = self.fetch_page(url)
        records = extract_all(markup, profile, url)
        self.logger.info(
            "[%s] Extracted %d products from %s",
            profile.name,
            len(records),
            url,
        )
        return records

    def scrape_product(
        self, url: str, profile: StoreProfile,
    ) -> ProductRecord | None:
        """Fetch a product detail page and extract its single record."""
        profile.require_valid()
        markup = self.fetch_page(url)
        record = extract_one(markup, profile, url)
        if record is None:
            self.logger.info(
                "[%s] No product found on %s", profile.name, url
            )
        return record

    def search_store(
        self, query: str, profile: StoreProfile,
    ) -> list[ProductRecord]:
        """Run *query* against one store's search page."""
        url = profile.build_search_url(query)
        self.logger.info("[%s] Searching '%s' via %s", profile.name, query, url)
        return self.scrape_store(url, profile)
