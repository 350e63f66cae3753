"""
Page routing guard and the sidebar navigation it renders around pages.

Sign-in pages are only for anonymous visitors and every other page is only
for signed-in users; `resolve_redirect` decides where a request must go
instead, if anywhere.
"""
from typing import List, Optional

from backend.app.core.rbac import can_access_resource

LOGIN_PATH = "/login"
SIGNUP_PATH = "/signup"
HOME_PATH = "/"
AUTH_PATHS = frozenset({LOGIN_PATH, SIGNUP_PATH})


class GuardRedirect(Exception):
    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


def is_auth_page(path: str) -> bool:
    return path in AUTH_PATHS


def resolve_redirect(path: str, user) -> Optional[str]:
    if user is None and not is_auth_page(path):
        return LOGIN_PATH
    if user is not None and is_auth_page(path):
        return HOME_PATH
    return None


NAVIGATION = [
    {"name": "Dashboard", "href": "/", "resource": None},
    {
        "name": "Inventory",
        "children": [
            {"name": "Raw Materials", "href": "/inventory/raw-materials", "resource": "raw-materials"},
            {"name": "Finished Goods", "href": "/inventory/finished-goods", "resource": "finished-goods"},
            {"name": "Stock Movement", "href": "/inventory/stock-movement", "resource": "stock-movement"},
            {"name": "Stock Transfer", "href": "/inventory/stock-transfer", "resource": "stock-transfer"},
        ],
    },
    {
        "name": "Warehouses",
        "children": [
            {"name": "General Warehouse", "href": "/warehouses/general", "resource": "warehouses"},
            {"name": "Raw Material Warehouse", "href": "/warehouses/raw-material", "resource": "warehouses"},
            {"name": "Finished Goods", "href": "/warehouses/finished-goods", "resource": "warehouses"},
            {"name": "Oyarifa Retail", "href": "/warehouses/oyarifa-retail", "resource": "warehouses"},
            {"name": "A-Z Bulk", "href": "/warehouses/az-bulk", "resource": "warehouses"},
        ],
    },
    {"name": "Manufacturing", "href": "/manufacturing", "resource": "manufacturing"},
    {"name": "Suppliers", "href": "/suppliers", "resource": "suppliers"},
    {"name": "Deliveries", "href": "/deliveries", "resource": "deliveries"},
    {"name": "Reports", "href": "/reports", "resource": "reports"},
    {"name": "Settings", "href": "/settings", "resource": "settings"},
]


def _visible(item, user) -> bool:
    resource = item.get("resource")
    return resource is None or can_access_resource(user.role, resource, user.permissions)


def navigation_for(user) -> List[dict]:
    """The sidebar entries this user may open; sections with no visible children are dropped."""
    items = []
    for item in NAVIGATION:
        if "children" in item:
            children = [child for child in item["children"] if _visible(child, user)]
            if children:
                items.append({**item, "children": children})
        elif _visible(item, user):
            items.append(item)
    return items
