import os


class Settings:
    def __init__(self):
        self.app_name = os.getenv("APP_NAME", "Renewal Tracker")
        self.api_version = "1.0.0"
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.secret_key = os.getenv("SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./renewals.db")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.object_storage_bucket = os.getenv("OBJECT_STORAGE_BUCKET", "renewal-attachments")
        self.object_storage_private_dir = os.getenv("OBJECT_STORAGE_PRIVATE_DIR", ".private")
        self.object_storage_base_url = os.getenv("OBJECT_STORAGE_BASE_URL", "http://localhost:8000/storage")
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
            if origin.strip()
        ]


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
