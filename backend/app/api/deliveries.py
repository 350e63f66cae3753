from fastapi import APIRouter, Depends, Query
from typing import Optional
from backend.app.core.auth import require_permission
from backend.app.core.rbac import Permission
from backend.app.schemas.records import DeliveryCreate, DeliveryUpdate
from backend.app.schemas.user import UserProfile
from backend.app.services.records import DELIVERIES, RecordService, get_record_service

router = APIRouter()


@router.get("/")
def list_deliveries(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_DELIVERIES)),
    records: RecordService = Depends(get_record_service),
):
    """List deliveries, newest first."""
    rows = records.list(DELIVERIES, search=search, sort_by=sort, direction=direction)
    return {"data": rows, "count": len(rows)}


@router.post("/", status_code=201)
def create_delivery(
    request: DeliveryCreate,
    current_user: UserProfile = Depends(require_permission(Permission.CREATE_DELIVERY)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.create(DELIVERIES, request.model_dump())}


@router.get("/{delivery_id}")
def get_delivery(
    delivery_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_DELIVERIES)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.get(DELIVERIES, delivery_id)}


@router.patch("/{delivery_id}")
def update_delivery(
    delivery_id: str,
    request: DeliveryUpdate,
    current_user: UserProfile = Depends(require_permission(Permission.UPDATE_DELIVERY)),
    records: RecordService = Depends(get_record_service),
):
    """Update only the fields present in the request body."""
    return {"data": records.update(DELIVERIES, delivery_id, request.model_dump(exclude_unset=True))}


@router.delete("/{delivery_id}")
def delete_delivery(
    delivery_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.DELETE_DELIVERY)),
    records: RecordService = Depends(get_record_service),
):
    records.delete(DELIVERIES, delivery_id)
    return {"success": True, "message": "Delivery deleted"}
