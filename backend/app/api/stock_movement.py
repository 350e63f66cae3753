from fastapi import APIRouter, Depends, Query
from typing import Optional
from backend.app.core.auth import require_permission
from backend.app.core.rbac import Permission
from backend.app.schemas.records import StockMovementCreate, StockMovementUpdate
from backend.app.schemas.user import UserProfile
from backend.app.services.records import STOCK_MOVEMENT, RecordService, get_record_service

router = APIRouter()


@router.get("/")
def list_stock_movement(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_STOCK_MOVEMENT)),
    records: RecordService = Depends(get_record_service),
):
    """List stock movements, newest first."""
    rows = records.list(STOCK_MOVEMENT, search=search, sort_by=sort, direction=direction)
    return {"data": rows, "count": len(rows)}


@router.post("/", status_code=201)
def create_stock_movement(
    request: StockMovementCreate,
    current_user: UserProfile = Depends(require_permission(Permission.CREATE_STOCK_MOVEMENT)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.create(STOCK_MOVEMENT, request.model_dump())}


@router.get("/{movement_id}")
def get_stock_movement(
    movement_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_STOCK_MOVEMENT)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.get(STOCK_MOVEMENT, movement_id)}


@router.patch("/{movement_id}")
def update_stock_movement(
    movement_id: str,
    request: StockMovementUpdate,
    current_user: UserProfile = Depends(require_permission(Permission.UPDATE_STOCK_MOVEMENT)),
    records: RecordService = Depends(get_record_service),
):
    """Update only the fields present in the request body."""
    return {"data": records.update(STOCK_MOVEMENT, movement_id, request.model_dump(exclude_unset=True))}


@router.delete("/{movement_id}")
def delete_stock_movement(
    movement_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.DELETE_STOCK_MOVEMENT)),
    records: RecordService = Depends(get_record_service),
):
    records.delete(STOCK_MOVEMENT, movement_id)
    return {"success": True, "message": "Stock movement deleted"}
