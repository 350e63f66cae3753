from enum import Enum
from typing import Dict, Iterable, List, Optional

from backend.app.schemas.user import UserRole


class Permission(str, Enum):
    # Suppliers
    VIEW_SUPPLIERS = "view_suppliers"
    CREATE_SUPPLIER = "create_supplier"
    UPDATE_SUPPLIER = "update_supplier"
    DELETE_SUPPLIER = "delete_supplier"

    # Raw materials
    VIEW_RAW_MATERIALS = "view_raw_materials"
    CREATE_RAW_MATERIAL = "create_raw_material"
    UPDATE_RAW_MATERIAL = "update_raw_material"
    DELETE_RAW_MATERIAL = "delete_raw_material"

    # Finished goods
    VIEW_FINISHED_GOODS = "view_finished_goods"
    CREATE_FINISHED_GOOD = "create_finished_good"
    UPDATE_FINISHED_GOOD = "update_finished_good"
    DELETE_FINISHED_GOOD = "delete_finished_good"

    # Stock movement
    VIEW_STOCK_MOVEMENT = "view_stock_movement"
    CREATE_STOCK_MOVEMENT = "create_stock_movement"
    UPDATE_STOCK_MOVEMENT = "update_stock_movement"
    DELETE_STOCK_MOVEMENT = "delete_stock_movement"

    # Stock transfer
    VIEW_STOCK_TRANSFER = "view_stock_transfer"
    CREATE_STOCK_TRANSFER = "create_stock_transfer"
    UPDATE_STOCK_TRANSFER = "update_stock_transfer"
    DELETE_STOCK_TRANSFER = "delete_stock_transfer"

    # Deliveries
    VIEW_DELIVERIES = "view_deliveries"
    CREATE_DELIVERY = "create_delivery"
    UPDATE_DELIVERY = "update_delivery"
    DELETE_DELIVERY = "delete_delivery"

    # Manufacturing
    VIEW_MANUFACTURING = "view_manufacturing"
    CREATE_MANUFACTURING_ORDER = "create_manufacturing_order"
    UPDATE_MANUFACTURING_ORDER = "update_manufacturing_order"
    DELETE_MANUFACTURING_ORDER = "delete_manufacturing_order"

    # Warehouses
    VIEW_WAREHOUSES = "view_warehouses"
    UPDATE_WAREHOUSE = "update_warehouse"

    # Reports
    VIEW_REPORTS = "view_reports"
    EXPORT_DATA = "export_data"

    # Settings
    VIEW_SETTINGS = "view_settings"
    UPDATE_SETTINGS = "update_settings"

    # User management
    VIEW_USERS = "view_users"
    CREATE_USER = "create_user"
    UPDATE_USER_ROLE = "update_user_role"
    DELETE_USER = "delete_user"


_USER_MANAGEMENT = {
    Permission.VIEW_USERS,
    Permission.CREATE_USER,
    Permission.UPDATE_USER_ROLE,
    Permission.DELETE_USER,
}

_VIEW_ONLY = [
    Permission.VIEW_SUPPLIERS,
    Permission.VIEW_RAW_MATERIALS,
    Permission.VIEW_FINISHED_GOODS,
    Permission.VIEW_STOCK_MOVEMENT,
    Permission.VIEW_STOCK_TRANSFER,
    Permission.VIEW_DELIVERIES,
    Permission.VIEW_MANUFACTURING,
    Permission.VIEW_WAREHOUSES,
    Permission.VIEW_REPORTS,
]

ROLE_PERMISSIONS: Dict[UserRole, List[Permission]] = {
    UserRole.ADMIN: list(Permission),
    # Everything except user management and changing settings
    UserRole.MANAGER: [
        p for p in Permission
        if p not in _USER_MANAGEMENT and p != Permission.UPDATE_SETTINGS
    ],
    UserRole.STAFF: _VIEW_ONLY + [
        Permission.CREATE_STOCK_MOVEMENT,
        Permission.UPDATE_STOCK_MOVEMENT,
        Permission.CREATE_STOCK_TRANSFER,
        Permission.UPDATE_STOCK_TRANSFER,
        Permission.CREATE_DELIVERY,
        Permission.UPDATE_DELIVERY,
    ],
    UserRole.VIEWER: list(_VIEW_ONLY),
}

RESOURCE_PERMISSIONS: Dict[str, Permission] = {
    "suppliers": Permission.VIEW_SUPPLIERS,
    "raw-materials": Permission.VIEW_RAW_MATERIALS,
    "finished-goods": Permission.VIEW_FINISHED_GOODS,
    "stock-movement": Permission.VIEW_STOCK_MOVEMENT,
    "stock-transfer": Permission.VIEW_STOCK_TRANSFER,
    "deliveries": Permission.VIEW_DELIVERIES,
    "manufacturing": Permission.VIEW_MANUFACTURING,
    "warehouses": Permission.VIEW_WAREHOUSES,
    "reports": Permission.VIEW_REPORTS,
    "settings": Permission.VIEW_SETTINGS,
}


def _coerce_role(role) -> Optional[UserRole]:
    if role is None or isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def has_permission(role, permission: Permission, custom_permissions: Optional[Iterable[str]] = None) -> bool:
    """
    Check whether a role grants a permission.
    Custom permissions are overrides and are checked first; a missing role is
    treated as viewer, an unrecognised role grants nothing.
    """
    if custom_permissions and Permission(permission).value in set(custom_permissions):
        return True

    if not role:
        return permission in ROLE_PERMISSIONS[UserRole.VIEWER]

    resolved = _coerce_role(role)
    if resolved is None:
        return False
    return permission in ROLE_PERMISSIONS.get(resolved, [])


def has_any_permission(role, permissions: Iterable[Permission], custom_permissions=None) -> bool:
    return any(has_permission(role, p, custom_permissions) for p in permissions)


def has_all_permissions(role, permissions: Iterable[Permission], custom_permissions=None) -> bool:
    return all(has_permission(role, p, custom_permissions) for p in permissions)


def get_role_permissions(role) -> List[Permission]:
    resolved = _coerce_role(role)
    return list(ROLE_PERMISSIONS.get(resolved, [])) if resolved else []


def can_access_resource(role, resource: str, custom_permissions=None) -> bool:
    permission = RESOURCE_PERMISSIONS.get(resource)
    return has_permission(role, permission, custom_permissions) if permission else False
