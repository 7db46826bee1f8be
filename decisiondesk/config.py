import os
from dataclasses import dataclass

DEFAULT_DATA_DIR = "data"
DEFAULT_REPORTS_DIR = "reports"
DEFAULT_ENVIRONMENT = "production"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_HISTORY_LIMIT = 500


@dataclass(frozen=True)
class AppConfig:
    data_dir: str = DEFAULT_DATA_DIR
    reports_dir: str = DEFAULT_REPORTS_DIR
    environment: str = DEFAULT_ENVIRONMENT
    log_level: str = DEFAULT_LOG_LEVEL
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @property
    def log_dir(self) -> str:
        return os.path.join(self.data_dir, "log")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _env_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_config() -> AppConfig:
    """Build the app config from DECISIONDESK_* environment variables.

    Read on every script run so a changed environment (or a test's
    monkeypatched one) is picked up without restarting the server.
    """
    env = (os.environ.get("DECISIONDESK_ENV") or DEFAULT_ENVIRONMENT).strip().lower()
    level = (os.environ.get("DECISIONDESK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    return AppConfig(
        data_dir=os.environ.get("DECISIONDESK_DATA_DIR") or DEFAULT_DATA_DIR,
        reports_dir=os.environ.get("DECISIONDESK_REPORTS_DIR") or DEFAULT_REPORTS_DIR,
        environment=env,
        log_level=level,
        history_limit=_env_int("DECISIONDESK_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
    )
