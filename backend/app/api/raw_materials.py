from fastapi import APIRouter, Depends, Query
from typing import Optional
from backend.app.core.auth import require_permission
from backend.app.core.rbac import Permission
from backend.app.schemas.records import RawMaterialCreate, RawMaterialUpdate
from backend.app.schemas.user import UserProfile
from backend.app.services.records import RAW_MATERIALS, RecordService, get_record_service

router = APIRouter()


@router.get("/")
def list_raw_materials(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_RAW_MATERIALS)),
    records: RecordService = Depends(get_record_service),
):
    """List the raw materials catalog."""
    rows = records.list(RAW_MATERIALS, search=search, sort_by=sort, direction=direction)
    return {"data": rows, "count": len(rows)}


@router.post("/", status_code=201)
def create_raw_material(
    request: RawMaterialCreate,
    current_user: UserProfile = Depends(require_permission(Permission.CREATE_RAW_MATERIAL)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.create(RAW_MATERIALS, request.model_dump())}


@router.get("/{material_id}")
def get_raw_material(
    material_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_RAW_MATERIALS)),
    records: RecordService = Depends(get_record_service),
):
    return {"data": records.get(RAW_MATERIALS, material_id)}


@router.patch("/{material_id}")
def update_raw_material(
    material_id: str,
    request: RawMaterialUpdate,
    current_user: UserProfile = Depends(require_permission(Permission.UPDATE_RAW_MATERIAL)),
    records: RecordService = Depends(get_record_service),
):
    """Update only the fields present in the request body."""
    return {"data": records.update(RAW_MATERIALS, material_id, request.model_dump(exclude_unset=True))}


@router.delete("/{material_id}")
def delete_raw_material(
    material_id: str,
    current_user: UserProfile = Depends(require_permission(Permission.DELETE_RAW_MATERIAL)),
    records: RecordService = Depends(get_record_service),
):
    records.delete(RAW_MATERIALS, material_id)
    return {"success": True, "message": "Raw material deleted"}
