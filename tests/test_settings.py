from backend.app.core.settings import Settings, get_settings


def test_settings_defaults():
    settings = get_settings()
    assert settings.app_name == "Renewal Tracker"
    assert settings.environment == "development"
    assert isinstance(settings.secret_key, str) and settings.secret_key
    assert settings.database_url.startswith("sqlite:///")
    assert settings.access_token_expire_minutes == 60 * 24 * 7


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("OBJECT_STORAGE_BUCKET", "other-bucket")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, ,https://b.example.com")
    settings = Settings()
    assert settings.object_storage_bucket == "other-bucket"
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 30
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
