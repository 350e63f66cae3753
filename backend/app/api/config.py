from fastapi import APIRouter
from backend.app.core.config import settings

router = APIRouter()


def firebase_web_config() -> dict:
    return {
        "apiKey": settings.FIREBASE_API_KEY,
        "authDomain": settings.FIREBASE_AUTH_DOMAIN,
        "projectId": settings.FIREBASE_PROJECT_ID,
        "storageBucket": settings.FIREBASE_STORAGE_BUCKET,
        "messagingSenderId": settings.FIREBASE_MESSAGING_SENDER_ID,
        "appId": settings.FIREBASE_APP_ID,
        "measurementId": settings.FIREBASE_MEASUREMENT_ID,
    }


@router.get("/firebase")
async def get_firebase_config():
    """
    Public Firebase web configuration for the sign-in pages. These values are
    meant for the browser SDK and carry no secrets.
    """
    return firebase_web_config()
