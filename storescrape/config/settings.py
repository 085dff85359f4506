# storescrape/config/settings.py

"""Central configuration for the storescrape engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Static settings shared by every run.

    Per-user tunables (delay, user agent, product cap) live in
    :class:`~storescrape.models.app_config.AppConfig` instead, which is
    persisted and passed explicitly into the pipeline.
    """

    # --- Transport ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    SUCCESS_STATUS_RANGE: range = range(200, 300)
    DEFAULT_ENCODING: str = "utf-8"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("STORESCRAPE_DATA_DIR", str(BASE_DIR / "data"))
    )
    STORES_PATH: Path = DATA_DIR / "stores.json"
    CONFIG_PATH: Path = DATA_DIR / "config.json"
    RESULTS_PATH: Path = DATA_DIR / "search_results.json"
    EXPORTS_DIR: Path = DATA_DIR / "exports"
    LOGS_DIR: Path = BASE_DIR / "logs"
