import logging
from typing import Optional

from hcl_catalog.config import settings
from hcl_catalog.data.field_mapper import FieldResolver
from hcl_catalog.logic.aggregator import aggregate, build_sheet_contexts
from hcl_catalog.logic.os_normalizer import sort_os_labels
from hcl_catalog.services.catalog import ProductCatalog
from hcl_catalog.sync.service import SyncService

logger = logging.getLogger(__name__)


def load_catalog(
    sync_service: SyncService,
    firmware_sheet: Optional[str] = None,
    continuation: Optional[str] = None,
    resolver: Optional[FieldResolver] = None,
) -> ProductCatalog:
    """
    One full load cycle: fetch every sheet, aggregate, and return a fresh snapshot.
    Callers replace their previous snapshot with the result; nothing is merged.
    """
    rows_by_sheet = sync_service.fetch_all()
    sheets = build_sheet_contexts(
        sync_service.sheet_names,
        firmware_sheet=firmware_sheet or settings.sheets.firmware_sheet,
    )
    result = aggregate(
        sheets,
        [rows_by_sheet.get(sheet.name, []) for sheet in sheets],
        resolver=resolver,
        continuation=continuation or settings.sheets.continuation,
    )
    catalog = ProductCatalog(
        products=tuple(result.products),
        os_list=tuple(sort_os_labels(result.observed_os)),
        sources=dict(sync_service.status),
        fallback_os=settings.groups.default_os,
    )
    logger.info(f"Catalog loaded: {len(catalog)} products, {len(catalog.os_list)} OS labels")
    return catalog
