import pytest

from course_drive.config import load_config

DRIVE_ENV_VARS = (
    'GOOGLE_DRIVE_ROOT_FOLDER_ID',
    'DRIVE_CACHE_TTL_SECONDS',
    'DRIVE_MAX_CONCURRENT_LISTINGS',
    'DRIVE_CACHE_DEGRADED_TREES',
    'CORS_ALLOWED_ORIGINS',
)


@pytest.fixture()
def dev_env(monkeypatch):
    monkeypatch.delenv("RENDER", raising=False)
    monkeypatch.delenv("SENTRY_ENVIRONMENT", raising=False)
    monkeypatch.setenv("FLASK_ENV", "development")
    for name in DRIVE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_load_config_requires_secret_key_in_non_dev(monkeypatch):
    monkeypatch.setenv("RENDER", "true")
    monkeypatch.delenv("FLASK_ENV", raising=False)
    monkeypatch.delenv("SENTRY_ENVIRONMENT", raising=False)
    monkeypatch.delenv("ENV", raising=False)
    monkeypatch.delenv("FLASK_SECRET_KEY", raising=False)

    with pytest.raises(RuntimeError):
        load_config()


def test_load_config_allows_missing_secret_in_dev(dev_env):
    dev_env.delenv("FLASK_SECRET_KEY", raising=False)

    cfg = load_config()
    assert cfg.flask_secret_key == ""
    assert cfg.is_dev_like is True


def test_load_config_drive_defaults(dev_env):
    cfg = load_config()

    assert cfg.drive_root_folder_id == ""
    assert cfg.drive_cache_ttl_seconds == 300
    assert cfg.drive_max_concurrent_listings == 4
    assert cfg.drive_cache_degraded_trees is True
    assert "http://localhost:5000" in cfg.cors_allowed_origins


def test_load_config_reads_and_clamps_drive_settings(dev_env):
    dev_env.setenv("GOOGLE_DRIVE_ROOT_FOLDER_ID", " root-123 ")
    dev_env.setenv("DRIVE_CACHE_TTL_SECONDS", "not-a-number")
    dev_env.setenv("DRIVE_MAX_CONCURRENT_LISTINGS", "500")
    dev_env.setenv("DRIVE_CACHE_DEGRADED_TREES", "off")
    dev_env.setenv("CORS_ALLOWED_ORIGINS", "https://Courses.example.com, ")

    cfg = load_config()

    assert cfg.drive_root_folder_id == "root-123"
    assert cfg.drive_cache_ttl_seconds == 300
    assert cfg.drive_max_concurrent_listings == 64
    assert cfg.drive_cache_degraded_trees is False
    assert cfg.cors_allowed_origins == frozenset({"https://courses.example.com"})
