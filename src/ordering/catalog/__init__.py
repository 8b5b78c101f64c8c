"""Catalog factory.

Provides get_catalog() / set_catalog() so the API process can plug in the
real catalog adapter while tests use InMemoryCatalog.
"""

from ordering.catalog.memory_adapter import InMemoryCatalog
from ordering.catalog.port import Catalog, ProductSnapshot

__all__ = ["Catalog", "InMemoryCatalog", "ProductSnapshot", "get_catalog", "reset_catalog", "set_catalog"]

_current_catalog: Catalog | None = None


def get_catalog() -> Catalog:
    """Return the current catalog. Defaults to an empty InMemoryCatalog."""
    global _current_catalog
    if _current_catalog is None:
        _current_catalog = InMemoryCatalog()
    return _current_catalog


def set_catalog(catalog: Catalog) -> None:
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    global _current_catalog
    _current_catalog = None
