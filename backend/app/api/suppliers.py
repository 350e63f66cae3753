from fastapi import APIRouter, Depends, Query
from typing import Optional
from backend.app.core.auth import require_permission
from backend.app.core.rbac import Permission
from backend.app.schemas.records import SupplierCreate, SupplierUpdate
from backend.app.schemas.user import UserProfile
from backend.app.services.records import SUPPLIERS, RecordService, get_record_service

router = APIRouter()


@router.get("/")
def list_suppliers(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_SUPPLIERS)),
    records: RecordService = Depends(get_record_service),
):
    """List all suppliers, sorted by name."""
    rows = records.list(SUPPLIERS, search=search, sort_by=sort, direction=direction)
    return {"data": rows, "count": len(rows)}


@router.post("/", status_code=201)
def create_supplier(
    request: SupplierCreate,
    current_user: UserProfile = Depends(require_permission(Permission.CREATE_SUPPLIER)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.create(SUPPLIERS, request.model_dump())}


@router.get("/{supplier_id}")
def get_supplier(
    supplier_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_SUPPLIERS)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.get(SUPPLIERS, supplier_id)}


@router.patch("/{supplier_id}")
def update_supplier(
    supplier_id: str,
    request: SupplierUpdate,
    current_user: UserProfile = Depends(require_permission(Permission.UPDATE_SUPPLIER)),
    records: RecordService = Depends(get_record_service),
):
    """Update only the fields present in the request body."""
    return {"data": records.update(SUPPLIERS, supplier_id, request.model_dump(exclude_unset=True))}


@router.delete("/{supplier_id}")
def delete_supplier(
    supplier_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.DELETE_SUPPLIER)),
    records: RecordService = Depends(get_record_service),
):
    records.delete(SUPPLIERS, supplier_id)
    return {"success": True, "message": "Supplier deleted"}
