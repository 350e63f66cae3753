from fastapi import APIRouter, Depends, Query
from typing import Optional
from backend.app.core.auth import require_permission
from backend.app.core.rbac import Permission
from backend.app.schemas.records import ManufacturingOrderCreate, ManufacturingOrderUpdate
from backend.app.schemas.user import UserProfile
from backend.app.services.records import MANUFACTURING, RecordService, get_record_service

router = APIRouter()


@router.get("/")
def list_manufacturing(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_MANUFACTURING)),
    records: RecordService = Depends(get_record_service),
):
    """List manufacturing orders, most recent first."""
    rows = records.list(MANUFACTURING, search=search, sort_by=sort, direction=direction)
    return {"data": rows, "count": len(rows)}


@router.post("/", status_code=201)
def create_manufacturing_order(
    request: ManufacturingOrderCreate,
    current_user: UserProfile = Depends(require_permission(Permission.CREATE_MANUFACTURING_ORDER)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.create(MANUFACTURING, request.model_dump())}


@router.get("/{order_id}")
def get_manufacturing_order(
    order_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_MANUFACTURING)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.get(MANUFACTURING, order_id)}


@router.patch("/{order_id}")
def update_manufacturing_order(
    order_id: str,
    request: ManufacturingOrderUpdate,
    current_user: UserProfile = Depends(require_permission(Permission.UPDATE_MANUFACTURING_ORDER)),
    records: RecordService = Depends(get_record_service),
):
    """Update only the fields present in the request body."""
    return {"data": records.update(MANUFACTURING, order_id, request.model_dump(exclude_unset=True))}


@router.delete("/{order_id}")
def delete_manufacturing_order(
    order_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.DELETE_MANUFACTURING_ORDER)),
    records: RecordService = Depends(get_record_service),
):
    records.delete(MANUFACTURING, order_id)
    return {"success": True, "message": "Manufacturing order deleted"}
