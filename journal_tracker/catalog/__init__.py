"""Third Iron catalog integration."""

from journal_tracker.catalog.client import CatalogClient

__all__ = ["CatalogClient"]
