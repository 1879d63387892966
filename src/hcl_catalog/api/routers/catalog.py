from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from hcl_catalog.api.deps import get_catalog
from hcl_catalog.logic.commands import update_command
from hcl_catalog.logic.os_normalizer import classify
from hcl_catalog.services.catalog import ProductCatalog

router = APIRouter(prefix="/catalog", tags=["Catalog"])

MENU_LEVELS = {
    "component": ("type", "brand"),
    "brand": ("brand",),
}


@router.get("/products")
def search_products(
    q: Optional[str] = Query(None, description="Substring of model or brand"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    return [p.model_dump() for p in catalog.filter(q)]


@router.get("/products/{model:path}")
def get_product(model: str, catalog: ProductCatalog = Depends(get_catalog)):
    product = catalog.find_by_model(model)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Model '{model}' not found")
    return {**product.model_dump(), "update_command": update_command(product)}


@router.get("/os")
def os_list(catalog: ProductCatalog = Depends(get_catalog)):
    return {"os_list": list(catalog.os_list), "default": catalog.default_os}


@router.get("/os/classify")
def classify_os(label: str = Query(..., description="Raw OS label")):
    info = classify(label)
    return {
        "family": info.family,
        "version_tag": info.version_tag,
        "badge": info.badge,
        "display": info.display,
    }


@router.get("/menu")
def browse_menu(
    by: str = Query("component", description="component|brand"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    levels = MENU_LEVELS.get(by)
    if levels is None:
        raise HTTPException(status_code=400, detail="Invalid menu grouping")
    return catalog.menu(levels)


@router.get("/values/{field}")
def distinct_values(field: str, catalog: ProductCatalog = Depends(get_catalog)):
    try:
        return catalog.list_distinct_values(field)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/drivers")
def driver_matrix(
    os: Optional[str] = Query(None, description="Exact OS label; defaults to the first known OS"),
    q: Optional[str] = Query(None, description="Substring of model or brand"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    target_os = os or catalog.default_os
    os_info = classify(target_os)
    rows = []
    for product in catalog.filter(q):
        display, status = catalog.driver_status(product, target_os)
        rows.append(
            {
                "model": product.model,
                "brand": product.brand,
                "type": product.type,
                "fw": product.fw,
                "id": product.id,
                "driver": display,
                "status": status,
                "update_command": update_command(product),
            }
        )
    return {"os": target_os, "os_display": os_info.display, "badge": os_info.badge, "products": rows}
