import os
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.templating import Jinja2Templates

from backend.app.api.config import firebase_web_config
from backend.app.api.reports import build_summary
from backend.app.api.warehouses import WAREHOUSE_TYPES, load_inventory
from backend.app.core.auth import get_optional_user
from backend.app.core.config import settings
from backend.app.core.guard import GuardRedirect, navigation_for, resolve_redirect
from backend.app.core.rbac import Permission, can_access_resource, has_permission
from backend.app.schemas.user import UserProfile
from backend.app.services.profiles import profile_store
from backend.app.services.records import RESOURCES, RecordService, get_record_service

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))

router = APIRouter()

PAGE_TITLES = {
    "raw-materials": "Raw Materials",
    "finished-goods": "Finished Goods",
    "stock-movement": "Stock Movement",
    "stock-transfer": "Stock Transfer",
    "suppliers": "Suppliers",
    "deliveries": "Deliveries",
    "manufacturing": "Manufacturing",
}

WAREHOUSE_TITLES = {
    "general": "General Warehouse",
    "raw-material": "Raw Material Warehouse",
    "finished-goods": "Finished Goods Warehouse",
    "oyarifa-retail": "Oyarifa Retail Warehouse",
    "az-bulk": "A-Z Bulk Warehouse",
}


async def guarded_user(request: Request, user: Optional[UserProfile] = Depends(get_optional_user)):
    """Resolve the signed-in user for a page, redirecting when the page is not for them."""
    location = resolve_redirect(request.url.path, user)
    if location:
        raise GuardRedirect(location)
    return user


def render(request: Request, template: str, user: Optional[UserProfile], status_code: int = 200, **context):
    context.setdefault("title", settings.APP_TITLE)
    return templates.TemplateResponse(
        request,
        template,
        {
            "user": user,
            "navigation": navigation_for(user) if user else [],
            "app_title": settings.APP_TITLE,
            "toast": request.query_params.get("toast"),
            "firebase_config": firebase_web_config(),
            **context,
        },
        status_code=status_code,
    )


def forbidden(request: Request, user: UserProfile):
    return render(request, "forbidden.html", user, status_code=403, title="Access denied")


def _columns(mapping):
    return [(name, label) for name, label in mapping.fields.items()]


# Sign-in pages render without the shell

@router.get("/login")
async def login_page(request: Request, user=Depends(guarded_user)):
    return render(request, "login.html", user, title="Sign in")


@router.get("/signup")
async def signup_page(request: Request, user=Depends(guarded_user)):
    return render(request, "signup.html", user, title="Create account")


@router.get("/")
def dashboard(
    request: Request,
    user: UserProfile = Depends(guarded_user),
    records: RecordService = Depends(get_record_service),
):
    summary = None
    if has_permission(user.role, Permission.VIEW_REPORTS, user.permissions):
        summary = build_summary(records)
    return render(request, "dashboard.html", user, title="Dashboard", summary=summary)


def _records_page(request: Request, user: UserProfile, records: RecordService, resource: str,
                  search: Optional[str] = None):
    if not can_access_resource(user.role, resource, user.permissions):
        return forbidden(request, user)
    mapping = RESOURCES[resource]
    rows = records.list(mapping, search=search)
    return render(
        request,
        "records.html",
        user,
        title=PAGE_TITLES[resource],
        resource=resource,
        columns=_columns(mapping),
        rows=rows,
        search=search or "",
        can_export=has_permission(user.role, Permission.EXPORT_DATA, user.permissions),
    )


@router.get("/inventory/{resource}")
def inventory_page(
    request: Request,
    resource: str,
    search: Optional[str] = None,
    user: UserProfile = Depends(guarded_user),
    records: RecordService = Depends(get_record_service),
):
    if resource not in ("raw-materials", "finished-goods", "stock-movement", "stock-transfer"):
        raise HTTPException(status_code=404, detail="Page not found")
    return _records_page(request, user, records, resource, search)


@router.get("/suppliers")
def suppliers_page(request: Request, search: Optional[str] = None,
                   user: UserProfile = Depends(guarded_user),
                   records: RecordService = Depends(get_record_service)):
    return _records_page(request, user, records, "suppliers", search)


@router.get("/deliveries")
def deliveries_page(request: Request, search: Optional[str] = None,
                    user: UserProfile = Depends(guarded_user),
                    records: RecordService = Depends(get_record_service)):
    return _records_page(request, user, records, "deliveries", search)


@router.get("/manufacturing")
def manufacturing_page(request: Request, search: Optional[str] = None,
                       user: UserProfile = Depends(guarded_user),
                       records: RecordService = Depends(get_record_service)):
    return _records_page(request, user, records, "manufacturing", search)


@router.get("/warehouses/{warehouse_type}")
def warehouse_page(
    request: Request,
    warehouse_type: str,
    user: UserProfile = Depends(guarded_user),
    records: RecordService = Depends(get_record_service),
):
    if warehouse_type not in WAREHOUSE_TYPES:
        raise HTTPException(status_code=404, detail="Page not found")
    if not can_access_resource(user.role, "warehouses", user.permissions):
        return forbidden(request, user)

    inventory = load_inventory(records, warehouse_type)
    mapping, _ = WAREHOUSE_TYPES[warehouse_type]
    return render(
        request,
        "records.html",
        user,
        title=WAREHOUSE_TITLES[warehouse_type],
        resource=None,
        columns=_columns(mapping),
        rows=inventory["data"],
        total_value=inventory.get("total_value"),
        search="",
        can_export=False,
    )


@router.get("/reports")
def reports_page(
    request: Request,
    user: UserProfile = Depends(guarded_user),
    records: RecordService = Depends(get_record_service),
):
    if not can_access_resource(user.role, "reports", user.permissions):
        return forbidden(request, user)
    return render(
        request,
        "reports.html",
        user,
        title="Reports",
        summary=build_summary(records),
        resources=list(RESOURCES),
        can_export=has_permission(user.role, Permission.EXPORT_DATA, user.permissions),
    )


@router.get("/settings")
async def settings_page(request: Request, user: UserProfile = Depends(guarded_user)):
    if not can_access_resource(user.role, "settings", user.permissions):
        return forbidden(request, user)

    users = None
    if has_permission(user.role, Permission.VIEW_USERS, user.permissions) and profile_store.db is not None:
        users = profile_store.list()
    return render(request, "settings.html", user, title="Settings", users=users)
