from mock_interview.config import Settings


def test_defaults(monkeypatch):
    for name in ["LLM_PROVIDER", "LLM_TIMEOUT_SECONDS", "LLM_MAX_RETRIES", "ALLOWED_ORIGINS", "RATE_LIMIT_ENABLED"]:
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.llm_provider == "template"
    assert settings.llm_timeout_seconds == 60.0
    assert settings.llm_max_retries == 0
    assert settings.rate_limit_enabled is True
    assert settings.allowed_origins == ["http://localhost:5173"]


def test_from_env(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", " Gemini ")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
    monkeypatch.setenv("LLM_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("LLM_MAX_RETRIES", "2")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.llm_provider == "gemini"
    assert settings.gemini_api_key == "g-key"
    assert settings.llm_timeout_seconds == 12.5
    assert settings.llm_max_retries == 2
    assert settings.allowed_origins == ["http://a.test", "http://b.test"]
    assert settings.rate_limit_enabled is False
    assert settings.log_level == "DEBUG"
