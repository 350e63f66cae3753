from fastapi import APIRouter, Depends, Query
from typing import Optional
from backend.app.core.auth import require_permission
from backend.app.core.rbac import Permission
from backend.app.schemas.records import FinishedGoodCreate, FinishedGoodUpdate
from backend.app.schemas.user import UserProfile
from backend.app.services.records import FINISHED_GOODS, RecordService, get_record_service

router = APIRouter()


@router.get("/")
def list_finished_goods(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_FINISHED_GOODS)),
    records: RecordService = Depends(get_record_service),
):
    """List finished goods by product name."""
    rows = records.list(FINISHED_GOODS, search=search, sort_by=sort, direction=direction)
    return {"data": rows, "count": len(rows)}


@router.post("/", status_code=201)
def create_finished_good(
    request: FinishedGoodCreate,
    current_user: UserProfile = Depends(require_permission(Permission.CREATE_FINISHED_GOOD)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.create(FINISHED_GOODS, request.model_dump())}


@router.get("/{product_id}")
def get_finished_good(
    product_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_FINISHED_GOODS)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.get(FINISHED_GOODS, product_id)}


@router.patch("/{product_id}")
def update_finished_good(
    product_id: str,
    request: FinishedGoodUpdate,
    current_user: UserProfile = Depends(require_permission(Permission.UPDATE_FINISHED_GOOD)),
    records: RecordService = Depends(get_record_service),
):
    """Update only the fields present in the request body."""
    return {"data": records.update(FINISHED_GOODS, product_id, request.model_dump(exclude_unset=True))}


@router.delete("/{product_id}")
def delete_finished_good(
    product_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.DELETE_FINISHED_GOOD)),
    records: RecordService = Depends(get_record_service),
):
    records.delete(FINISHED_GOODS, product_id)
    return {"success": True, "message": "Finished good deleted"}
