"""Smoke tests for importing and configuring the application."""

from hotel_booking.core.config import Settings


def test_import_app():
    """Test that we can import and build the app."""
    from hotel_booking.main import create_app
    app = create_app()
    paths = set(app.openapi()["paths"])
    assert {"/booking", "/booking/{booking_id}", "/metrics"} <= paths


def test_settings_parse_cors_origins():
    """Comma-separated CORS origins become a list."""
    settings = Settings(cors_origins="http://a.test, http://b.test")
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_settings_normalize_environment_and_log_level():
    """Environment and log level are case-normalized."""
    settings = Settings(environment="Production", log_level="debug")
    assert settings.environment == "production"
    assert settings.is_production
    assert not settings.debug
    assert settings.log_level == "DEBUG"
