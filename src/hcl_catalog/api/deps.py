from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from hcl_catalog.config import settings
from hcl_catalog.services.catalog import ProductCatalog
from hcl_catalog.services.exporter import GroupExporter
from hcl_catalog.services.groups import GroupStore
from hcl_catalog.services.loader import load_catalog
from hcl_catalog.sync.provider import build_provider
from hcl_catalog.sync.service import SyncService

logger = logging.getLogger(__name__)


class CatalogState:
    """
    Holds the current catalog snapshot. A reload builds a new snapshot and swaps the reference;
    readers keep whatever snapshot they already hold.
    """

    def __init__(self):
        self._catalog = ProductCatalog(fallback_os=settings.groups.default_os)
        self._lock = Lock()

    @property
    def current(self) -> ProductCatalog:
        return self._catalog

    def reload(self, sync_service: SyncService) -> ProductCatalog:
        catalog = load_catalog(sync_service)
        with self._lock:
            self._catalog = catalog
        return catalog


# Global/Cached instances
_sync_instance: Optional[SyncService] = None
catalog_state = CatalogState()
group_store = GroupStore()


def get_sync_service() -> SyncService:
    global _sync_instance
    if _sync_instance is None:
        provider = build_provider(settings.sheets, settings.google)
        _sync_instance = SyncService(provider=provider, sheet_names=settings.sheets.target_sheets)
    return _sync_instance


def get_catalog_state() -> CatalogState:
    return catalog_state


def get_catalog() -> ProductCatalog:
    return catalog_state.current


def get_group_store() -> GroupStore:
    return group_store


def get_exporter() -> GroupExporter:
    return GroupExporter(catalog=catalog_state.current)


def reset_state(sync_service: Optional[SyncService] = None) -> None:
    """Drops cached services and state; used by create_app."""
    global _sync_instance, catalog_state, group_store
    _sync_instance = sync_service
    catalog_state = CatalogState()
    group_store = GroupStore()
