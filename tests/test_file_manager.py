# tests/test_file_manager.py

"""Tests for the FileManager persistence and CSV export."""

import csv
import json
import tempfile
import unittest
from pathlib import Path
from typing import Any

from storescrape.models.app_config import AppConfig
from storescrape.models.product import ProductRecord
from storescrape.models.store import StoreCollection, StoreProfile
from storescrape.storage.file_manager import CSV_HEADER, FileManager


def _products() -> list[ProductRecord]:
    return [
        ProductRecord(
            name='Widget 10" "Pro"',
            price="$10.00",
            url="https://x.com/w",
            store_name="X",
            description="Blue",
        ),
        ProductRecord(
            name="Gadget",
            price="$5.00",
            url="https://y.com/g",
            store_name="Y",
        ),
    ]


class _TempDirCase(unittest.TestCase):
    """Base case with a fresh data directory per test."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.data_dir = Path(self._tmp.name)
        self.fm = FileManager(self.data_dir)


class TestStoresPersistence(_TempDirCase):
    """Loading and saving the store collection."""

    def test_missing_file_creates_default(self) -> None:
        """First load writes and returns the default collection."""
        stores = self.fm.load_stores()
        self.assertEqual(len(stores), 1)
        self.assertTrue(self.fm.stores_path.exists())

    def test_save_then_load(self) -> None:
        """Saved stores come back in order."""
        stores = StoreCollection([
            StoreProfile(
                name=name,
                base_url=f"https://{name.lower()}.example",
                container_selector=".item",
                name_selector=".n",
                price_selector=".p",
            )
            for name in ["A", "B"]
        ])
        self.fm.save_stores(stores)
        loaded = self.fm.load_stores()
        self.assertEqual([s.name for s in loaded], ["A", "B"])

    def test_corrupt_file_falls_back_without_overwrite(self) -> None:
        """Broken JSON yields defaults and leaves the file alone."""
        self.fm.stores_path.write_text("{not json", encoding="utf-8")
        stores = self.fm.load_stores()
        self.assertEqual(len(stores), 1)
        self.assertEqual(
            self.fm.stores_path.read_text(encoding="utf-8"), "{not json"
        )

    def test_strict_load_raises_on_corrupt_file(self) -> None:
        """strict=True surfaces the parse error instead of defaulting."""
        self.fm.stores_path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ValueError):
            self.fm.load_stores(strict=True)

    def test_duplicate_names_fall_back(self) -> None:
        """A file with duplicate store names is not loaded."""
        entry = StoreCollection.default()[0].to_dict()
        entry["name"] = "Dup"
        self.fm.stores_path.write_text(
            json.dumps({"stores": [entry, entry]}), encoding="utf-8"
        )
        stores = self.fm.load_stores()
        self.assertIsNone(stores.find("Dup"))

    def test_backup_copies_file(self) -> None:
        """backup_stores writes an identical timestamped copy."""
        self.fm.load_stores()
        backup = self.fm.backup_stores()
        self.assertTrue(backup.name.startswith("stores_backup_"))
        self.assertEqual(
            backup.read_text(encoding="utf-8"),
            self.fm.stores_path.read_text(encoding="utf-8"),
        )

    def test_backup_without_file_raises(self) -> None:
        """Nothing to back up raises FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            self.fm.backup_stores()


class TestAppConfigPersistence(_TempDirCase):
    """Loading and saving the app config."""

    def test_missing_file_creates_default(self) -> None:
        """First load writes the defaults to disk."""
        config = self.fm.load_app_config()
        self.assertEqual(config, AppConfig())
        self.assertTrue(self.fm.config_path.exists())

    def test_save_then_load(self) -> None:
        """Saved values are read back."""
        self.fm.save_app_config(AppConfig(request_delay_ms=0, theme="light"))
        config = self.fm.load_app_config()
        self.assertEqual(config.request_delay_ms, 0)
        self.assertEqual(config.theme, "light")

    def test_corrupt_file_defaults(self) -> None:
        """Unreadable config yields defaults."""
        self.fm.config_path.write_text("[1, 2", encoding="utf-8")
        self.assertEqual(self.fm.load_app_config(), AppConfig())

    def test_non_object_defaults(self) -> None:
        """A JSON list instead of an object yields defaults."""
        self.fm.config_path.write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(self.fm.load_app_config(), AppConfig())

    def test_bad_typed_values_default(self) -> None:
        """Hand-edited values of the wrong type yield defaults."""
        for payload in (
            {"request_delay_ms": None},
            {"max_products_per_store": "lots"},
            {"auto_save_results": "yes"},
        ):
            with self.subTest(payload=payload):
                self.fm.config_path.write_text(
                    json.dumps(payload), encoding="utf-8"
                )
                config = self.fm.load_app_config()
                self.assertEqual(config, AppConfig())
                self.assertEqual(config.request_delay, 1.0)


class TestSearchResults(_TempDirCase):
    """Saving and loading the last search results."""

    def test_save_then_load(self) -> None:
        """Products survive a save/load cycle."""
        self.fm.save_search_results(_products())
        self.assertEqual(self.fm.load_search_results(), _products())

    def test_payload_has_timestamp(self) -> None:
        """The results document records when it was written."""
        path = self.fm.save_search_results(_products())
        with open(path, encoding="utf-8") as f:
            data: dict[str, Any] = json.load(f)
        self.assertIn("timestamp", data)
        self.assertEqual(len(data["products"]), 2)

    def test_missing_file_empty(self) -> None:
        """No results file means no products."""
        self.assertEqual(self.fm.load_search_results(), [])

    def test_corrupt_file_empty(self) -> None:
        """Unreadable results mean no products."""
        self.fm.results_path.write_text("oops", encoding="utf-8")
        self.assertEqual(self.fm.load_search_results(), [])


class TestExportCsv(_TempDirCase):
    """CSV export formatting."""

    def test_header_and_rows(self) -> None:
        """Header then one row per product, description blank if absent."""
        path = self.fm.export_csv(_products(), self.data_dir / "out.csv")
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        self.assertEqual(rows[0], CSV_HEADER)
        self.assertEqual(
            rows[1],
            ['Widget 10" "Pro"', "$10.00", "https://x.com/w", "X", "Blue"],
        )
        self.assertEqual(rows[2][4], "")

    def test_quotes_doubled_and_fields_quoted(self) -> None:
        """Every field is quoted and embedded quotes are doubled."""
        path = self.fm.export_csv(_products(), self.data_dir / "out.csv")
        lines = path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(
            lines[1],
            '"Widget 10"" ""Pro""","$10.00","https://x.com/w","X","Blue"',
        )

    def test_default_path_in_exports_dir(self) -> None:
        """Without a path, a timestamped file lands in exports/."""
        path = self.fm.export_csv(_products())
        self.assertEqual(path.parent, self.data_dir / "exports")
        self.assertTrue(path.name.endswith(".csv"))

    def test_empty_export_has_header_only(self) -> None:
        """An empty product list still writes the header."""
        path = self.fm.export_csv([], self.data_dir / "empty.csv")
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        self.assertEqual(rows, [CSV_HEADER])


if __name__ == "__main__":
    unittest.main()
