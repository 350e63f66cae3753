import json
import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)


def _service_account_from_env():
    """Build a service-account dict from FIREBASE_SERVICE_ACCOUNT or the split key variables."""
    raw = (os.getenv("FIREBASE_CREDENTIALS") or os.getenv("FIREBASE_SERVICE_ACCOUNT") or "").strip()
    if raw:
        return json.loads(raw)

    client_email = os.getenv("FIREBASE_CLIENT_EMAIL", "").strip()
    private_key = os.getenv("FIREBASE_PRIVATE_KEY", "")
    if client_email and private_key:
        # Hosting providers store the key with escaped newlines
        return {
            "type": "service_account",
            "project_id": os.getenv("FIREBASE_PROJECT_ID", ""),
            "client_email": client_email,
            "private_key": private_key.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    return None


def _credential_file():
    possible_paths = [
        "service-account.json",
        "backend/service-account.json",
        os.path.join(os.path.dirname(__file__), "..", "..", "service-account.json"),
    ]
    return next((p for p in possible_paths if os.path.exists(p)), None)


def initialize_firebase():
    """
    Initialize the Firebase Admin SDK (auth + Firestore) and return a Firestore client.

    Credential resolution order:
    1) FIREBASE_CREDENTIALS / FIREBASE_SERVICE_ACCOUNT (JSON string), or
       FIREBASE_CLIENT_EMAIL + FIREBASE_PRIVATE_KEY
    2) local service-account.json files (for local development)
    3) application default credentials (works on GCP environments)

    Returns None when Firestore cannot be reached; profile lookups then fall
    back to the default role.
    """
    try:
        if not firebase_admin._apps:
            options = {}
            if os.getenv("FIREBASE_PROJECT_ID"):
                options["projectId"] = os.getenv("FIREBASE_PROJECT_ID")

            cred = None
            try:
                account = _service_account_from_env()
                if account:
                    cred = credentials.Certificate(account)
                else:
                    path = _credential_file()
                    if path:
                        cred = credentials.Certificate(path)
                        logger.info("Firebase credentials loaded from %s", path)
            except (ValueError, IOError) as e:
                logger.error("Invalid Firebase service account, using default credentials: %s", e)
                cred = None

            if cred is None:
                logger.warning("No Firebase credentials found. Using default credentials (may fail locally).")
            firebase_admin.initialize_app(cred, options or None)

        return firestore.client()
    except Exception as e:
        logger.critical("Failed to initialize Firestore client: %s", e)
        return None


db = initialize_firebase()
