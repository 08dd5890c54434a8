from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

DEFAULT_DB_HOST = "localhost"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - APP_ENV: 'development' (default) or 'production'
    - PERSISTENCE_BACKEND: 'file' or 'postgres' to force a backend; auto-selected when unset
    - DATA_FILE: path to the JSON document used by the file backend. Default './data/db.json'
    - DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD: fallback database connection values
    - AWS_REGION: region of AWS Secrets Manager (remote secrets are only used in production)
    - SECRETS_MANAGER_SECRET_NAME: secret id holding the database credentials
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level; DEBUG in development, INFO otherwise
    - LOG_DIR: directory for per-level log files; console only when unset
    - HOST, API_PORT: bind address of the HTTP server
    """

    environment: str
    persistence_backend: Optional[str]
    data_file: str
    db_host: str
    db_host_configured: bool
    db_port: str
    db_name: str
    db_user: str
    db_password: str
    aws_region: Optional[str]
    secret_name: str
    cors_allow_origins: List[str]
    log_level: str
    log_dir: Optional[str]
    host: str
    port: int

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def use_postgres(self) -> bool:
        """
        Decide the storage backend. An explicit PERSISTENCE_BACKEND wins; otherwise
        production or a non-default DB_HOST selects PostgreSQL.
        """
        if self.persistence_backend is not None:
            return self.persistence_backend == "postgres"
        if self.is_production:
            return True
        return self.db_host_configured and self.db_host != DEFAULT_DB_HOST


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    environment = _get_env("APP_ENV", "development").strip().lower()

    backend: Optional[str] = os.getenv("PERSISTENCE_BACKEND", "").strip().lower() or None
    if backend not in {None, "file", "postgres"}:
        # Unknown values fall back to automatic selection
        backend = None

    log_default = "DEBUG" if environment == "development" else "INFO"

    return Settings(
        environment=environment,
        persistence_backend=backend,
        data_file=_get_env("DATA_FILE", "./data/db.json").strip(),
        db_host=_get_env("DB_HOST", DEFAULT_DB_HOST).strip(),
        db_host_configured=bool(os.getenv("DB_HOST")),
        db_port=_get_env("DB_PORT", "5432").strip(),
        db_name=_get_env("DB_NAME", "todoapp"),
        db_user=_get_env("DB_USER", "todoapp_user"),
        db_password=_get_env("DB_PASSWORD", "todoapp_password"),
        aws_region=os.getenv("AWS_REGION") or None,
        secret_name=_get_env("SECRETS_MANAGER_SECRET_NAME", "todoapp-secrets"),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", log_default).strip().upper(),
        log_dir=os.getenv("LOG_DIR") or None,
        host=_get_env("HOST", "0.0.0.0"),
        port=_parse_int(_get_env("API_PORT", "3001"), 3001),
    )
