import pytest

from loi_service.config import load_config


def test_defaults(monkeypatch):
    for name in ("PORT", "HOST", "PDF_ENGINE", "CORS_ALLOW_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config = load_config()
    assert config.port == 3000
    assert config.host == "0.0.0.0"
    assert config.pdf_engine == "chromium"
    assert config.cors_origins == ["*"]
    assert config.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("PDF_ENGINE", "WeasyPrint")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    config = load_config()
    assert config.port == 8080
    assert config.pdf_engine == "weasyprint"
    assert config.cors_origins == ["https://a.example", "https://b.example"]
    assert config.log_level == "DEBUG"


def test_unknown_engine_rejected(monkeypatch):
    monkeypatch.setenv("PDF_ENGINE", "prince")
    with pytest.raises(ValueError):
        load_config()
