# storescrape/models/app_config.py

"""User-tunable application settings persisted between runs."""

from dataclasses import asdict, dataclass
from typing import Any

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
)


def _require(value: Any, kind: type, key: str) -> Any:
    if not isinstance(value, kind):
        raise TypeError(
            f"{key} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


@dataclass
class AppConfig:
    """Runtime knobs threaded into the pipeline and aggregator."""

    max_products_per_store: int = 50   # 0 disables the cap
    request_delay_ms: int = 1000       # Pause before every fetch
    user_agent: str = DEFAULT_USER_AGENT
    auto_save_results: bool = True
    theme: str = "dark"

    @property
    def request_delay(self) -> float:
        """Delay in seconds, as ``time.sleep`` expects it."""
        return max(self.request_delay_ms, 0) / 1000.0

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppConfig":
        """Build a config, ignoring unknown keys and defaulting missing ones.

        Numeric fields accept anything ``int()`` does (``"10"`` -> 10).

        Raises:
            TypeError: a known key holds null or a value of the wrong type.
            ValueError: a numeric field holds non-numeric text.
        """
        defaults = cls()
        return cls(
            max_products_per_store=int(
                data.get(
                    "max_products_per_store",
                    defaults.max_products_per_store,
                )
            ),
            request_delay_ms=int(
                data.get("request_delay_ms", defaults.request_delay_ms)
            ),
            user_agent=_require(
                data.get("user_agent", defaults.user_agent),
                str,
                "user_agent",
            ),
            auto_save_results=_require(
                data.get("auto_save_results", defaults.auto_save_results),
                bool,
                "auto_save_results",
            ),
            theme=_require(data.get("theme", defaults.theme), str, "theme"),
        )
