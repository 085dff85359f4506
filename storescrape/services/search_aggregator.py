# storescrape/services/search_aggregator.py

"""Runs one query across every enabled store and merges the results."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from storescrape.models.app_config import AppConfig
from storescrape.models.product import ProductRecord
from storescrape.models.store import StoreProfile
from storescrape.scraping.pipeline import StorePipeline

logger = logging.getLogger("storescrape.aggregator")


@dataclass
class SearchOutcome:
    """Merged result of a multi-store search.

    ``products`` follows store order first, then on-page order.
    ``errors`` maps a failed store's name to its diagnostic message.
    """

    query: str
    products: list[ProductRecord] = field(
        default_factory=lambda: list[ProductRecord]()
    )
    success_count: int = 0
    failure_count: int = 0
    errors: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )

    @property
    def status(self) -> str:
        """One-line summary of the run."""
        return (
            f"{self.success_count} succeeded, "
            f"{self.failure_count} failed, "
            f"{len(self.products)} products"
        )


class SearchAggregator:
    """Fans a query out to each enabled store, tolerating failures.

    Each store gets its own :class:`StorePipeline` (and HTTP session)
    built by *pipeline_factory*, so worker threads share nothing but the
    read-only config.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        pipeline_factory: Callable[[AppConfig], StorePipeline] = StorePipeline,
    ) -> None:
        self.config = config if config is not None else AppConfig()
        self.pipeline_factory = pipeline_factory

    def _cap(self, records: list[ProductRecord]) -> list[ProductRecord]:
        limit = self.config.max_products_per_store
        return records[:limit] if limit > 0 else records

    def _search_one(
        self, query: str, profile: StoreProfile,
    ) -> list[ProductRecord]:
        pipeline = self.pipeline_factory(self.config)
        return pipeline.search_store(query, profile)

    async def search_all(
        self,
        query: str,
        profiles: list[StoreProfile],
    ) -> SearchOutcome:
        """Search every enabled profile concurrently.

        Results are merged in profile order, not completion order. A
        failing store is counted and described in ``errors`` but never
        stops its siblings.
        """
        outcome = SearchOutcome(query=query)
        enabled = [profile for profile in profiles if profile.enabled]
        if not enabled:
            logger.info("No enabled stores for query '%s'", query)
            return outcome

        tasks = [
            asyncio.to_thread(self._search_one, query, profile)
            for profile in enabled
        ]
        batches = await asyncio.gather(*tasks, return_exceptions=True)

        for profile, batch in zip(enabled, batches):
            if isinstance(batch, BaseException):
                outcome.failure_count += 1
                outcome.errors[profile.name] = str(batch)
                logger.error(
                    "[%s] Search for '%s' failed: %s",
                    profile.name,
                    query,
                    batch,
                    exc_info=batch,
                )
                continue
            outcome.success_count += 1
            outcome.products.extend(self._cap(batch))

        logger.info("Search '%s': %s", query, outcome.status)
        return outcome

    def search_all_sync(
        self,
        query: str,
        profiles: list[StoreProfile],
    ) -> SearchOutcome:
        """Blocking wrapper around :meth:`search_all`."""
        return asyncio.run(self.search_all(query, profiles))
