from fastapi import APIRouter, Depends

from hcl_catalog.api.deps import CatalogState, get_catalog_state, get_sync_service
from hcl_catalog.sync.service import SyncService

router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post("/reload")
def reload_catalog(
    sync_service: SyncService = Depends(get_sync_service),
    state: CatalogState = Depends(get_catalog_state),
):
    catalog = state.reload(sync_service)
    return catalog.summary()


@router.get("/status")
def sync_status(
    sync_service: SyncService = Depends(get_sync_service),
    state: CatalogState = Depends(get_catalog_state),
):
    return {
        **sync_service.get_status(),
        "catalog": state.current.summary(),
    }
