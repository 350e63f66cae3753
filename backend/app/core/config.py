import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment: "development" or "production"
    ENVIRONMENT: str = "development"
    DEV_AUTH_BYPASS: bool = False
    LOG_LEVEL: str = "INFO"

    APP_TITLE: str = "GlamPack - Warehouse Management System"
    APP_DESCRIPTION: str = "Professional warehouse and supply chain management system"

    # CORS: Comma-separated list of allowed origins
    ALLOWED_ORIGINS: str = "http://localhost:8001,http://localhost:8000"

    AIRTABLE_API_KEY: str = ""
    AIRTABLE_BASE_ID: str = ""
    AIRTABLE_API_URL: str = "https://api.airtable.com/v0"
    AIRTABLE_TIMEOUT: int = 15

    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_STORAGE_BUCKET: str = ""
    FIREBASE_API_KEY: str = ""
    FIREBASE_AUTH_DOMAIN: str = ""
    FIREBASE_MESSAGING_SENDER_ID: str = ""
    FIREBASE_APP_ID: str = ""
    FIREBASE_MEASUREMENT_ID: str = ""

    SESSION_COOKIE_NAME: str = "session"
    SESSION_COOKIE_DAYS: int = 5

    LOW_STOCK_THRESHOLD: float = 10

    class Config:
        # Look for .env in the current directory, or in the backend directory relative to this file
        _env_path = ".env"
        if not os.path.exists(_env_path):
            _base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
            _env_path = os.path.join(_base_dir, ".env")

        env_file = _env_path
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


settings = Settings()
