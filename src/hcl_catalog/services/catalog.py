from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Dict, List, Optional, Sequence, Tuple

from hcl_catalog.data.models import NOT_AVAILABLE, DriverEntry, Product

DISTINCT_FIELDS = ("type", "brand", "model", "fw", "id")
MENU_FIELDS = ("type", "brand")


@dataclass(frozen=True)
class ProductCatalog:
    """
    Immutable snapshot of one load cycle.
    Deterministic query layer used by the API, CLI and exporters; nothing here mutates.
    """

    products: Tuple[Product, ...] = ()
    os_list: Tuple[str, ...] = ()
    loaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    sources: Dict[str, dict] = field(default_factory=dict)
    fallback_os: str = "Windows"

    def __len__(self) -> int:
        return len(self.products)

    @property
    def default_os(self) -> str:
        return self.os_list[0] if self.os_list else self.fallback_os

    def find_by_model(self, model: str) -> Optional[Product]:
        return next((p for p in self.products if p.model == model), None)

    def filter(self, keyword: Optional[str] = None) -> List[Product]:
        """
        Case-insensitive substring match over model or brand.
        A blank keyword returns the full catalog.
        """
        kw = (keyword or "").strip().lower()
        if not kw:
            return list(self.products)
        return [p for p in self.products if kw in p.model.lower() or kw in p.brand.lower()]

    def list_distinct_values(self, field_name: str) -> List[str]:
        if field_name not in DISTINCT_FIELDS:
            raise ValueError(f"Unsupported field: {field_name}")
        return sorted({getattr(p, field_name) for p in self.products if getattr(p, field_name)})

    def menu(self, levels: Sequence[str] = MENU_FIELDS) -> Dict[str, object]:
        """
        Nested browse tree, e.g. component -> vendor -> [models].
        Keys are sorted; models keep catalog order.
        """
        if not levels or any(level not in MENU_FIELDS for level in levels):
            raise ValueError(f"Menu levels must be drawn from {MENU_FIELDS}")
        return self._menu_level(list(self.products), list(levels))

    def _menu_level(self, products: List[Product], levels: List[str]):
        if not levels:
            return [p.model for p in products]
        head, rest = levels[0], levels[1:]
        keys = sorted({getattr(p, head) for p in products if getattr(p, head)})
        return {key: self._menu_level([p for p in products if getattr(p, head) == key], rest) for key in keys}

    @staticmethod
    def driver_for(product: Product, os_label: str) -> Optional[DriverEntry]:
        return next((d for d in product.drivers if d.os == os_label), None)

    def driver_status(self, product: Product, os_label: str) -> Tuple[str, str]:
        """(display value, status) of a product's driver for one exact OS label."""
        entry = self.driver_for(product, os_label)
        if entry is None:
            return "Unknown", "unknown"
        lower = entry.ver.lower()
        if lower in (NOT_AVAILABLE.lower(), ""):
            return "Not Listed", "unsupported"
        if "not support" in lower:
            return entry.ver, "unsupported"
        return entry.ver, "supported"

    def summary(self) -> dict:
        return {
            "products": len(self.products),
            "os_list": list(self.os_list),
            "loaded_at": self.loaded_at.isoformat(),
            "sources": self.sources,
        }
