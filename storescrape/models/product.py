# storescrape/models/product.py

"""Product record extracted from a store page."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class ProductRecord:
    """A single product scraped from one store.

    ``price`` keeps the raw text from the page; use :attr:`numeric_price`
    when a number is needed for sorting.
    """

    name: str
    price: str
    url: str
    image_url: str = ""
    store_name: str = ""
    description: str | None = None

    @property
    def numeric_price(self) -> float:
        """Best-effort float from the raw price text, 0.0 if unparseable."""
        kept = "".join(
            ch for ch in self.price if ch.isdigit() or ch in ".,"
        )
        try:
            return float(kept.replace(",", "."))
        except ValueError:
            return 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductRecord":
        """Build a record from a dict produced by :meth:`to_dict`."""
        description = data.get("description")
        return cls(
            name=str(data.get("name", "")),
            price=str(data.get("price", "")),
            url=str(data.get("url", "")),
            image_url=str(data.get("image_url", "")),
            store_name=str(data.get("store_name", "")),
            description=(
                str(description) if description is not None else None
            ),
        )
