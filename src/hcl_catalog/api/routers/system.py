from fastapi import APIRouter, Depends

from hcl_catalog.api.deps import get_catalog
from hcl_catalog.config import settings
from hcl_catalog.services.catalog import ProductCatalog

router = APIRouter()


@router.get("/health")
def health(catalog: ProductCatalog = Depends(get_catalog)):
    return {"status": "ok", "version": settings.app.version, "products": len(catalog)}
