from fastapi import APIRouter, Depends, HTTPException
from backend.app.core.auth import require_permission
from backend.app.core.rbac import Permission
from backend.app.schemas.user import UserProfile
from backend.app.services.records import RecordMapping, RecordService, get_record_service

router = APIRouter()

RAW_INVENTORY = RecordMapping(
    resource="warehouses",
    table="raw_materials_inventory",
    label="Raw material",
    fields={
        "material_name": "Material Name",
        "category": "Category",
        "supplier": "Supplier",
        "unit_cost": "Unit Cost",
        "current_stock": "Current Stock",
        "unit": "Unit",
        "reorder_level": "Reorder Level",
        "warehouse": "Warehouse",
    },
    sort=[{"field": "Material Name", "direction": "asc"}],
    defaults={"supplier": [], "unit_cost": 0, "current_stock": 0, "reorder_level": 0},
)

FINISHED_INVENTORY = RecordMapping(
    resource="warehouses",
    table="finished_goods",
    label="Finished good",
    fields={
        "product_name": "Product Name",
        "sku": "SKU",
        "category": "Category",
        "current_stock": "Current Stock",
        "unit": "Unit",
        "reorder_level": "Reorder Level",
        "warehouse": "Warehouse",
        "selling_price": "Selling Price",
        "cost_price": "Cost Price",
    },
    sort=[{"field": "Product Name", "direction": "asc"}],
    defaults={"current_stock": 0, "reorder_level": 0, "selling_price": 0, "cost_price": 0},
)

# Warehouse type -> (inventory table, warehouse name to filter on; None shows everything)
WAREHOUSE_TYPES = {
    "raw-material": (RAW_INVENTORY, None),
    "finished-goods": (FINISHED_INVENTORY, None),
    "general": (RAW_INVENTORY, "General Warehouse"),
    "oyarifa-retail": (FINISHED_INVENTORY, "Oyarifa Retail Store"),
    "az-bulk": (FINISHED_INVENTORY, "A-Z Bulk Warehouse"),
}


def warehouse_formula(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"{{Warehouse}} = '{escaped}'"


def load_inventory(records: RecordService, warehouse_type: str) -> dict:
    """Inventory of one warehouse type; finished-goods based types also carry the stock value."""
    if warehouse_type not in WAREHOUSE_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid warehouse type: {warehouse_type}")

    mapping, warehouse_filter = WAREHOUSE_TYPES[warehouse_type]
    inventory = records.list(
        mapping,
        filter_by_formula=warehouse_formula(warehouse_filter) if warehouse_filter else None,
    )

    result = {
        "data": inventory,
        "count": len(inventory),
        "warehouse_type": warehouse_type,
        "table_name": mapping.table_name,
        "warehouse_filter": warehouse_filter or "All",
    }
    if mapping is FINISHED_INVENTORY:
        result["total_value"] = sum(
            (item.get("current_stock") or 0) * (item.get("selling_price") or 0) for item in inventory
        )
    return result


@router.get("/{warehouse_type}")
def get_warehouse_inventory(
    warehouse_type: str,
    current_user: UserProfile = Depends(require_permission(Permission.VIEW_WAREHOUSES)),
    records: RecordService = Depends(get_record_service),
):
    return load_inventory(records, warehouse_type)
