from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from typing import Optional
from backend.app.core.auth import require_permission
from backend.app.core.config import settings
from backend.app.core.rbac import Permission
from backend.app.schemas.user import UserProfile
from backend.app.services.export import export_filename, iter_csv
from backend.app.services.records import (
    FINISHED_GOODS, RAW_MATERIALS, RESOURCES, RecordService, get_record_service
)

router = APIRouter()


def build_summary(records: RecordService, threshold: Optional[float] = None) -> dict:
    """Record counts per resource, stock values and low-stock items."""
    threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    rows = {name: records.list(mapping) for name, mapping in RESOURCES.items()}

    raw = rows[RAW_MATERIALS.resource]
    finished = rows[FINISHED_GOODS.resource]

    low_stock = [
        {"id": r["id"], "name": r["material_name"], "kind": "raw-material", "quantity": r["current_stock"]}
        for r in raw if (r["current_stock"] or 0) <= threshold
    ] + [
        {"id": r["id"], "name": r["product_name"], "kind": "finished-good", "quantity": r["available_quantity"]}
        for r in finished if (r["available_quantity"] or 0) <= threshold
    ]

    return {
        "counts": {name: len(items) for name, items in rows.items()},
        "raw_material_value": sum((r["unit_cost"] or 0) * (r["current_stock"] or 0) for r in raw),
        "finished_goods_value": sum((r["price"] or 0) * (r["available_quantity"] or 0) for r in finished),
        "low_stock_threshold": threshold,
        "low_stock": low_stock,
    }


@router.get("/summary")
def get_summary(
    threshold: Optional[float] = Query(None, ge=0),
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_REPORTS)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": build_summary(records, threshold)}


@router.get("/export/{resource}")
def export_resource(
    resource: str,
    search: Optional[str] = Query(None),
    current_user: UserProfile = Depends(require_permission(Permission.EXPORT_DATA)),
    records: RecordService = Depends(get_record_service),
):
    """Download one resource as CSV, optionally filtered by a search term."""
    mapping = RESOURCES.get(resource)
    if mapping is None:
        raise HTTPException(status_code=404, detail=f"Unknown resource: {resource}")

    rows = records.list(mapping, search=search)
    if not rows:
        raise HTTPException(status_code=404, detail="No data to export")

    filename = export_filename(resource)
    return StreamingResponse(
        iter_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
