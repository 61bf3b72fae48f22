import pytest

from batepapo.config import Settings


def test_defaults(clean_env):
    s = Settings()
    assert s.mongodb_uri == "mongodb://localhost:27017"
    assert s.database == "batepapo"
    assert s.stale_after_ms == 10000
    assert s.sweep_interval_s == 15
    assert s.cors_origins == ["*"]
    assert s.port == 5000


def test_env_overrides(clean_env, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "mongodb://db:27017")
    monkeypatch.setenv("BATEPAPO_STALE_AFTER_MS", "1000000")
    monkeypatch.setenv("BATEPAPO_CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("BATEPAPO_LOG_LEVEL", "debug")
    s = Settings()
    assert s.mongodb_uri == "mongodb://db:27017"
    assert s.stale_after_ms == 1000000
    assert s.cors_origins == ["http://a.test", "http://b.test"]
    assert s.log_level == "DEBUG"


def test_mongodb_uri_wins_over_database_url(clean_env, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MONGODB_URI", "mongodb://primary:27017")
    monkeypatch.setenv("DATABASE_URL", "mongodb://other:27017")
    assert Settings().mongodb_uri == "mongodb://primary:27017"


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_bad_threshold_rejected(clean_env, monkeypatch: pytest.MonkeyPatch, value):
    monkeypatch.setenv("BATEPAPO_STALE_AFTER_MS", value)
    with pytest.raises(RuntimeError):
        Settings()
