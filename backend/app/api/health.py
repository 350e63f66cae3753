from fastapi import APIRouter, Depends
from backend.app.core.airtable import TABLE_NAMES, get_airtable
from backend.app.core.auth import get_current_user
from backend.app.core.config import settings
from backend.app.schemas.user import UserProfile
from backend.app.services.profiles import profile_store
import time

router = APIRouter()


@router.get("/")
def health_check(current_user: UserProfile = Depends(get_current_user)):
    status = {
        "status": "ok",
        "timestamp": int(time.time()),
        "firebase": {"ok": False},
        "airtable": {"configured": bool(settings.AIRTABLE_API_KEY and settings.AIRTABLE_BASE_ID), "ok": False},
        "dev_auth_bypass": bool(settings.DEV_AUTH_BYPASS and settings.is_development),
    }

    # Firestore check
    try:
        if profile_store.db is None:
            raise RuntimeError("Firestore client is not initialized")
        _ = list(profile_store.db.collection(profile_store.collection).limit(1).stream())
        status["firebase"]["ok"] = True
    except Exception as e:
        status["firebase"]["error"] = str(e)
        status["status"] = "degraded"

    # Airtable check: one record from the suppliers table
    try:
        get_airtable().list(TABLE_NAMES["suppliers"], max_records=1, page_size=1)
        status["airtable"]["ok"] = True
    except Exception as e:
        status["airtable"]["error"] = str(e)
        status["status"] = "degraded"

    return status
