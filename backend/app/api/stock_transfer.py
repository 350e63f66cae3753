from fastapi import APIRouter, Depends, Query
from typing import Optional
from backend.app.core.auth import require_permission
from backend.app.core.rbac import Permission
from backend.app.schemas.records import StockTransferCreate, StockTransferUpdate
from backend.app.schemas.user import UserProfile
from backend.app.services.records import STOCK_TRANSFER, RecordService, get_record_service

router = APIRouter()


@router.get("/")
def list_stock_transfer(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_STOCK_TRANSFER)),
    records: RecordService = Depends(get_record_service),
):
    """List stock transfers between warehouses, newest first."""
    rows = records.list(STOCK_TRANSFER, search=search, sort_by=sort, direction=direction)
    return {"data": rows, "count": len(rows)}


@router.post("/", status_code=201)
def create_stock_transfer(
    request: StockTransferCreate,
    current_user: UserProfile = Depends(require_permission(Permission.CREATE_STOCK_TRANSFER)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.create(STOCK_TRANSFER, request.model_dump())}


@router.get("/{transfer_id}")
def get_stock_transfer(
    transfer_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_STOCK_TRANSFER)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.get(STOCK_TRANSFER, transfer_id)}


@router.patch("/{transfer_id}")
def update_stock_transfer(
    transfer_id: str,
    request: StockTransferUpdate,
    current_user: UserProfile = Depends(require_permission(Permission.UPDATE_STOCK_TRANSFER)),
    records: RecordService = Depends(get_record_service),
):
    """Update only the fields present in the request body."""
    return {"data": records.update(STOCK_TRANSFER, transfer_id, request.model_dump(exclude_unset=True))}


@router.delete("/{transfer_id}")
def delete_stock_transfer(
    transfer_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.DELETE_STOCK_TRANSFER)),
    records: RecordService = Depends(get_record_service),
):
    records.delete(STOCK_TRANSFER, transfer_id)
    return {"success": True, "message": "Stock transfer deleted"}
