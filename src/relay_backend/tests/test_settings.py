from __future__ import annotations

from relay_backend.config.settings import DEFAULT_GEMINI_MODEL, RelaySettings

_VARS = [
    "META_WABA_TOKEN",
    "META_PHONE_NUMBER_ID",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "GCP_PROJECT_EMAIL",
    "GCP_PRIVATE_KEY",
    "CALENDAR_ID",
    "SHEET_ID",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "PORT",
]


def _clear(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults(monkeypatch) -> None:
    _clear(monkeypatch)

    settings = RelaySettings.from_env()

    assert settings.port == 8080
    assert settings.gemini_model == DEFAULT_GEMINI_MODEL
    assert not any(settings.feature_flags().values())


def test_features_degrade_independently(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("GCP_PROJECT_EMAIL", "relay@proj.iam.gserviceaccount.com")
    monkeypatch.setenv("GCP_PRIVATE_KEY", "key")
    monkeypatch.setenv("SHEET_ID", "sheet")
    monkeypatch.setenv("CALENDAR_ID", "   ")
    monkeypatch.setenv("PORT", "9090")

    settings = RelaySettings.from_env()

    assert settings.port == 9090
    assert settings.feature_flags() == {
        "whatsapp": False,
        "storage": False,
        "calendar": False,
        "sheets": True,
        "ai": False,
    }
