from open_extreme.config import get_settings
from open_extreme.start_server import resolve_port


def test_settings_read_environment(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    monkeypatch.setenv("CHART_EXCHANGE", "bse")
    monkeypatch.setenv("APPROX_TOLERANCE", "0.001")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")

    settings = get_settings()

    assert settings.log_level == "DEBUG"
    assert settings.chart_exchange == "BSE"
    assert settings.approx_tolerance == 0.001
    assert settings.origins == ["https://a.example", "https://b.example"]
    get_settings.cache_clear()


def test_settings_defaults(monkeypatch):
    get_settings.cache_clear()
    for name in ("LOG_LEVEL", "CHART_EXCHANGE", "APPROX_TOLERANCE", "MAX_UPLOAD_BYTES", "ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.approx_tolerance == 1e-6
    assert settings.chart_exchange == "NSE"
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.origins == ["*"]
    get_settings.cache_clear()


def test_resolve_port_falls_back_on_bad_values():
    assert resolve_port("9000") == 9000
    assert resolve_port(" 8080 ") == 8080
    assert resolve_port(None) == 8000
    assert resolve_port("$PORT") == 8000
    assert resolve_port("0") == 8000
    assert resolve_port("70000", default=5000) == 5000
