import os
from dataclasses import dataclass, field
from typing import FrozenSet

DEV_ENV_NAMES = {'development', 'dev', 'local', 'test'}
TRUTHY_VALUES = {'1', 'true', 'yes', 'on'}
DEFAULT_CORS_ALLOWED_ORIGINS = frozenset({
    'http://127.0.0.1:5000',
    'http://localhost:5000',
    'http://127.0.0.1:5173',
    'http://localhost:5173',
})


def safe_int_env(name, default=0, minimum=1, maximum=100000):
    raw = str(os.getenv(name, str(default)) or '').strip()
    try:
        value = int(raw)
    except Exception:
        value = int(default)
    return min(max(value, minimum), maximum)


def safe_float_env(name, default=0.0):
    raw = str(os.getenv(name, str(default)) or '').strip()
    try:
        value = float(raw)
    except Exception:
        return default
    return min(max(value, 0.0), 1.0)


def env_flag(name, default=False):
    raw = os.getenv(name)
    if raw is None:
        return default
    return str(raw).strip().lower() in TRUTHY_VALUES


def env_str(name, default=''):
    return (os.getenv(name, default) or default).strip()


def parse_cors_allowed_origins(raw):
    raw = str(raw or '').strip()
    if raw:
        return frozenset(part.strip().lower() for part in raw.split(',') if part.strip())
    return DEFAULT_CORS_ALLOWED_ORIGINS


def detect_runtime_env():
    return (
        os.getenv('SENTRY_ENVIRONMENT')
        or os.getenv('FLASK_ENV')
        or os.getenv('ENV')
        or ('production' if os.getenv('RENDER') else 'development')
    ).strip().lower()


@dataclass(frozen=True)
class AppConfig:
    """Central config object for the app factory and the drive mirror."""

    flask_secret_key: str = ''
    log_level: str = 'INFO'
    runtime_env: str = 'development'
    sentry_dsn: str = ''
    sentry_environment: str = 'production'
    sentry_release: str = 'course-drive'
    sentry_traces_sample_rate: float = 0.0
    drive_root_folder_id: str = ''
    google_service_account_key_file: str = ''
    drive_cache_ttl_seconds: int = 300
    drive_max_concurrent_listings: int = 4
    drive_page_size: int = 100
    drive_api_num_retries: int = 3
    drive_cache_degraded_trees: bool = True
    firebase_credentials: str = ''
    cors_allowed_origins: FrozenSet[str] = field(default_factory=lambda: DEFAULT_CORS_ALLOWED_ORIGINS)

    @property
    def is_dev_like(self) -> bool:
        return self.runtime_env in DEV_ENV_NAMES


def load_config() -> AppConfig:
    runtime_env = detect_runtime_env()
    config = AppConfig(
        flask_secret_key=env_str('FLASK_SECRET_KEY'),
        log_level=(env_str('LOG_LEVEL', 'INFO') or 'INFO').upper(),
        runtime_env=runtime_env,
        sentry_dsn=env_str('SENTRY_DSN_BACKEND'),
        sentry_environment=env_str('SENTRY_ENVIRONMENT', os.getenv('FLASK_ENV', 'production') or 'production'),
        sentry_release=env_str('SENTRY_RELEASE', 'course-drive'),
        sentry_traces_sample_rate=safe_float_env('SENTRY_TRACES_SAMPLE_RATE', 0.0),
        drive_root_folder_id=env_str('GOOGLE_DRIVE_ROOT_FOLDER_ID'),
        google_service_account_key_file=env_str('GOOGLE_SERVICE_ACCOUNT_KEY_FILE'),
        drive_cache_ttl_seconds=safe_int_env('DRIVE_CACHE_TTL_SECONDS', 300, minimum=1, maximum=86400),
        drive_max_concurrent_listings=safe_int_env('DRIVE_MAX_CONCURRENT_LISTINGS', 4, minimum=1, maximum=64),
        drive_page_size=safe_int_env('DRIVE_PAGE_SIZE', 100, minimum=1, maximum=1000),
        drive_api_num_retries=safe_int_env('DRIVE_API_NUM_RETRIES', 3, minimum=0, maximum=10),
        drive_cache_degraded_trees=env_flag('DRIVE_CACHE_DEGRADED_TREES', True),
        firebase_credentials=env_str('FIREBASE_CREDENTIALS'),
        cors_allowed_origins=parse_cors_allowed_origins(os.getenv('CORS_ALLOWED_ORIGINS', '')),
    )
    if not config.is_dev_like and not config.flask_secret_key:
        raise RuntimeError('FLASK_SECRET_KEY must be set in non-development environments.')
    return config
