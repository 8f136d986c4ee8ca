"""Static product catalog loaded from the packaged YAML resource."""
from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from .exceptions import CallerInputError, CatalogError
from .models import ProductDescriptor, VettingLevel

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "products.yaml"


def _parse_product(code: str, item: Mapping[str, Any]) -> ProductDescriptor:
    try:
        vetting = VettingLevel(str(item["vetting"]).upper())
        periods = tuple(int(months) for months in item["periods"])
        return ProductDescriptor(
            code=code,
            name=str(item["name"]),
            periods=periods,
            vetting=vetting,
            process=str(item["process"]),
            reissuance=bool(item.get("reissuance", False)),
            can_renew=bool(item.get("canrenew", False)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CatalogError(f"Invalid catalog entry for product '{code}': {exc}") from exc


def load_catalog(path: str | Path) -> Mapping[str, ProductDescriptor]:
    """Load a product catalog file into a read-only mapping keyed by product code."""

    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    items = data.get("products") if isinstance(data, dict) else None
    if not isinstance(items, dict):
        raise CatalogError(f"Catalog {path} does not define a 'products' mapping")
    products: dict[str, ProductDescriptor] = {}
    for code, item in items.items():
        if not isinstance(item, dict):
            raise CatalogError(f"Invalid catalog entry for product '{code}'")
        products[str(code)] = _parse_product(str(code), item)
    return MappingProxyType(products)


PRODUCTS = load_catalog(DEFAULT_CATALOG_PATH)
"""Catalog shipped with the package, loaded once at import time."""


def get_product(
    code: str | None, catalog: Mapping[str, ProductDescriptor] = PRODUCTS
) -> ProductDescriptor:
    """Return the descriptor for *code* or fail with :class:`CallerInputError`."""

    if not code:
        raise CallerInputError("A product code is required")
    try:
        return catalog[code]
    except KeyError:
        raise CallerInputError(f"Unknown product code '{code}'") from None


__all__ = ["DEFAULT_CATALOG_PATH", "PRODUCTS", "get_product", "load_catalog"]
