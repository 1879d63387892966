from typing import Any, List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel

from hcl_catalog.api.deps import get_catalog, get_exporter, get_group_store
from hcl_catalog.logic.commands import update_command
from hcl_catalog.services.catalog import ProductCatalog
from hcl_catalog.services.exporter import GroupExporter
from hcl_catalog.services.groups import GroupStore

router = APIRouter(prefix="/groups", tags=["Groups"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class GroupCreate(BaseModel):
    name: Optional[str] = None
    os: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    os: Optional[str] = None
    color: Optional[str] = None


def _listing(store: GroupStore) -> dict:
    return {"active": store.active_id, "groups": store.dump(), "palette": store.palette}


@router.get("")
def list_groups(store: GroupStore = Depends(get_group_store)):
    return _listing(store)


@router.put("")
def replace_groups(payload: Any = Body(...), store: GroupStore = Depends(get_group_store)):
    """Restores groups saved by a client; malformed payloads reset to the default group."""
    store.load(payload)
    return _listing(store)


@router.post("")
def create_group(
    body: GroupCreate,
    store: GroupStore = Depends(get_group_store),
    catalog: ProductCatalog = Depends(get_catalog),
):
    group = store.create(name=body.name, os_label=body.os or catalog.default_os)
    return group.model_dump()


@router.patch("/{group_id}")
def update_group(group_id: str, body: GroupUpdate, store: GroupStore = Depends(get_group_store)):
    group = store.update(group_id, name=body.name, os_label=body.os, color=body.color)
    return group.model_dump()


@router.delete("/{group_id}")
def delete_group(group_id: str, store: GroupStore = Depends(get_group_store)):
    store.delete(group_id)
    return _listing(store)


@router.get("/{group_id}/products")
def group_products(
    group_id: str,
    store: GroupStore = Depends(get_group_store),
    catalog: ProductCatalog = Depends(get_catalog),
):
    group = store.get(group_id)
    rows: List[dict] = []
    for model in group.items:
        product = catalog.find_by_model(model)
        if product is None:
            continue
        display, status = catalog.driver_status(product, group.os)
        rows.append(
            {
                **product.model_dump(),
                "driver": display,
                "status": status,
                "update_command": update_command(product),
            }
        )
    return {"group": group.model_dump(), "products": rows}


@router.post("/{group_id}/items/{model:path}")
def add_item(
    group_id: str,
    model: str,
    store: GroupStore = Depends(get_group_store),
    catalog: ProductCatalog = Depends(get_catalog),
):
    return store.add_item(group_id, model, catalog).model_dump()


@router.delete("/{group_id}/items/{model:path}")
def remove_item(group_id: str, model: str, store: GroupStore = Depends(get_group_store)):
    return store.remove_item(group_id, model).model_dump()


@router.get("/{group_id}/export")
def export_group(
    group_id: str,
    fmt: str = Query("csv", alias="format", description="csv|xlsx"),
    store: GroupStore = Depends(get_group_store),
    exporter: GroupExporter = Depends(get_exporter),
):
    group = store.get(group_id)
    if not group.items:
        raise HTTPException(status_code=400, detail="Group has no items to export")
    if fmt == "csv":
        content, media_type = exporter.to_csv(group).encode("utf-8-sig"), "text/csv; charset=utf-8"
    elif fmt == "xlsx":
        content, media_type = exporter.to_xlsx(group), XLSX_MEDIA_TYPE
    else:
        raise HTTPException(status_code=400, detail="Invalid export format")
    filename = exporter.filename(group, fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
