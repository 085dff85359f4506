# storescrape/storage/file_manager.py

"""JSON persistence for stores, app config and results, plus CSV export."""

import csv
import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any

from storescrape.config.settings import Settings
from storescrape.models.app_config import AppConfig
from storescrape.models.product import ProductRecord
from storescrape.models.store import StoreCollection
from storescrape.scraping.errors import StoreCollectionError

logger = logging.getLogger("storescrape.storage")

CSV_HEADER = ["Name", "Price", "URL", "Store", "Description"]


class FileManager:
    """Reads and writes the project's JSON documents.

    A missing document is created from defaults on first load. A corrupt
    one is logged and replaced by defaults in memory only, so the broken
    file stays on disk for inspection.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir: Path = (
            data_dir if data_dir is not None else Settings.DATA_DIR
        )
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.stores_path = self.data_dir / Settings.STORES_PATH.name
        self.config_path = self.data_dir / Settings.CONFIG_PATH.name
        self.results_path = self.data_dir / Settings.RESULTS_PATH.name
        logger.debug("FileManager initialised, data_dir=%s", self.data_dir)

    # ── Helpers ──────────────────────────────────────────

    @staticmethod
    def _write_json(path: Path, data: Any) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    @staticmethod
    def _read_json(path: Path) -> Any:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    # ── Stores ───────────────────────────────────────────

    def load_stores(self, strict: bool = False) -> StoreCollection:
        """Load the store collection, seeding a default on first run.

        With *strict*, an unreadable file raises instead of falling back to
        defaults.
        """
        if not self.stores_path.exists():
            stores = StoreCollection.default()
            self.save_stores(stores)
            logger.info("Created default stores file at %s", self.stores_path)
            return stores
        try:
            data = self._read_json(self.stores_path)
            return StoreCollection.from_dict(data)
        except (OSError, ValueError, AttributeError, StoreCollectionError) as exc:
            if strict:
                raise
            logger.error(
                "Could not load %s, using defaults: %s",
                self.stores_path,
                exc,
                exc_info=True,
            )
            return StoreCollection.default()

    def save_stores(self, stores: StoreCollection) -> Path:
        """Write the store collection to disk."""
        self._write_json(self.stores_path, stores.to_dict())
        logger.info(
            "Saved %d stores to %s", len(stores), self.stores_path
        )
        return self.stores_path

    def backup_stores(self) -> Path:
        """Copy the stores file to a timestamped sibling.

        Raises:
            FileNotFoundError: there is no stores file yet.
        """
        if not self.stores_path.exists():
            raise FileNotFoundError(
                f"No stores file to back up at {self.stores_path}"
            )
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup = self.data_dir / f"stores_backup_{timestamp}.json"
        shutil.copyfile(self.stores_path, backup)
        logger.info("Backed up stores to %s", backup)
        return backup

    # ── App config ───────────────────────────────────────

    def load_app_config(self) -> AppConfig:
        """Load the app config, writing defaults on first run."""
        if not self.config_path.exists():
            config = AppConfig()
            self.save_app_config(config)
            return config
        try:
            return AppConfig.from_dict(self._read_json(self.config_path))
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            logger.error(
                "Could not load %s, using defaults: %s",
                self.config_path,
                exc,
                exc_info=True,
            )
            return AppConfig()

    def save_app_config(self, config: AppConfig) -> Path:
        """Write the app config to disk."""
        self._write_json(self.config_path, config.to_dict())
        logger.debug("Saved app config to %s", self.config_path)
        return self.config_path

    # ── Search results ───────────────────────────────────

    def save_search_results(self, products: list[ProductRecord]) -> Path:
        """Overwrite the last-results file with *products*."""
        payload = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "products": [p.to_dict() for p in products],
        }
        self._write_json(self.results_path, payload)
        logger.info(
            "Saved %d products to %s", len(products), self.results_path
        )
        return self.results_path

    def load_search_results(self) -> list[ProductRecord]:
        """Products from the last saved search, [] if none or unreadable."""
        if not self.results_path.exists():
            return []
        try:
            data = self._read_json(self.results_path)
            return [
                ProductRecord.from_dict(item)
                for item in data.get("products", [])
            ]
        except (OSError, ValueError, AttributeError) as exc:
            logger.warning(
                "Could not load %s: %s", self.results_path, exc
            )
            return []

    # ── Export ───────────────────────────────────────────

    def export_csv(
        self, products: list[ProductRecord], path: Path | None = None,
    ) -> Path:
        """Write *products* as CSV with every field quoted.

        Without *path*, a timestamped file is created under
        ``Settings.EXPORTS_DIR``.
        """
        if path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            exports_dir = self.data_dir / Settings.EXPORTS_DIR.name
            exports_dir.mkdir(parents=True, exist_ok=True)
            path = exports_dir / f"products_{timestamp}.csv"
        else:
            path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL)
            writer.writerow(CSV_HEADER)
            for p in products:
                writer.writerow(
                    [
                        p.name,
                        p.price,
                        p.url,
                        p.store_name,
                        p.description or "",
                    ]
                )

        logger.info("Exported %d products to %s", len(products), path)
        return path
