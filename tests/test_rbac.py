from backend.app.core.rbac import (
    Permission,
    ROLE_PERMISSIONS,
    can_access_resource,
    get_role_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from backend.app.schemas.user import UserRole


def test_admin_has_every_permission():
    assert all(has_permission(UserRole.ADMIN, p) for p in Permission)


def test_manager_cannot_manage_users_or_change_settings():
    assert has_permission("manager", Permission.DELETE_SUPPLIER)
    assert has_permission("manager", Permission.VIEW_SETTINGS)
    assert not has_permission("manager", Permission.UPDATE_SETTINGS)
    assert not has_permission("manager", Permission.VIEW_USERS)
    assert not has_permission("manager", Permission.UPDATE_USER_ROLE)


def test_staff_can_record_movements_but_not_delete():
    assert has_permission("staff", Permission.CREATE_STOCK_MOVEMENT)
    assert has_permission("staff", Permission.UPDATE_DELIVERY)
    assert not has_permission("staff", Permission.DELETE_STOCK_MOVEMENT)
    assert not has_permission("staff", Permission.CREATE_SUPPLIER)


def test_viewer_is_read_only():
    for permission in ROLE_PERMISSIONS[UserRole.VIEWER]:
        assert permission.value.startswith("view_")
    assert not has_permission("viewer", Permission.EXPORT_DATA)


def test_missing_role_is_treated_as_viewer():
    assert has_permission(None, Permission.VIEW_SUPPLIERS)
    assert not has_permission(None, Permission.CREATE_SUPPLIER)


def test_unknown_role_grants_nothing():
    assert not has_permission("superuser", Permission.VIEW_SUPPLIERS)
    assert get_role_permissions("superuser") == []


def test_custom_permissions_override_role():
    assert has_permission("viewer", Permission.EXPORT_DATA, ["export_data"])
    assert has_permission("superuser", Permission.VIEW_REPORTS, ["view_reports"])


def test_any_and_all():
    wanted = [Permission.VIEW_SUPPLIERS, Permission.DELETE_SUPPLIER]
    assert has_any_permission("viewer", wanted)
    assert not has_all_permissions("viewer", wanted)
    assert has_all_permissions("admin", wanted)


def test_resource_access():
    assert can_access_resource("viewer", "suppliers")
    assert not can_access_resource("viewer", "settings")
    assert can_access_resource("manager", "settings")
    assert not can_access_resource("admin", "unknown-page")
