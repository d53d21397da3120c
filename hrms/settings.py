from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    App settings.

    Notes:
    - Defaults target a local MySQL instance holding the `sp_*` procedures.
    - Every value can be overridden with an `HRMS_`-prefixed env var.
    """

    model_config = SettingsConfigDict(env_prefix="HRMS_", extra="ignore")

    db_url: str = "mysql+pymysql://root@127.0.0.1:3306/hrms"
    db_pool_size: int = 10
    db_connect_timeout: int = 10
    db_connect_retries: int = 5
    db_connect_base_delay: float = 2.0
    db_verify_on_startup: bool = True

    security_config_path: str | None = None
    log_level: str = "INFO"

    firebase_project_id: str | None = None
    firebase_jwks_uri: str | None = None
    clock_skew_seconds: int = 120
    jwks_cache_ttl_seconds: int = 3600

    # 0 disables the cache: every protected call re-resolves the role.
    role_cache_ttl_seconds: int = 0

    reports_dir: str | None = None
    cors_origins: list[str] = ["http://localhost:5173"]

    rate_limit_window_seconds: int = 900
    rate_limit_general: int = 1000
    rate_limit_auth: int = 20

    def resolved_security_config_path(self) -> Path:
        if self.security_config_path:
            return Path(self.security_config_path)

        repo_root = Path(__file__).resolve().parents[1]
        return repo_root / "config" / "security_config.yaml"

    def resolved_reports_dir(self) -> Path:
        if self.reports_dir:
            return Path(self.reports_dir)

        repo_root = Path(__file__).resolve().parents[1]
        return repo_root / "public" / "reports"


@lru_cache
def get_settings() -> Settings:
    return Settings()
