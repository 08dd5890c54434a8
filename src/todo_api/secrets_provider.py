from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .logging_config import get_logger
from .settings import Settings

logger = get_logger(__name__)

CACHE_DURATION_SECONDS = 5 * 60


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class DatabaseConfig:
    """Connection parameters for the PostgreSQL backend."""

    host: str
    port: int
    database: str
    user: str
    password: str
    ssl_mode: str

    def __repr__(self) -> str:
        return (
            f"DatabaseConfig(host={self.host!r}, port={self.port}, database={self.database!r}, "
            f"user={self.user!r}, ssl_mode={self.ssl_mode!r})"
        )


def _default_client_factory(region: str) -> Any:
    import boto3

    return boto3.client("secretsmanager", region_name=region)


# PUBLIC_INTERFACE
class SecretsProvider:
    """
    Supplies database credentials with a fixed-TTL in-memory cache.

    In production with an AWS region configured, credentials come from AWS Secrets
    Manager. Anywhere else, and whenever the remote fetch fails, they come from
    the DB_* environment settings. Both paths refresh the cache, so a failed
    remote fetch keeps serving the fallback values until the cache expires.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Optional[Callable[[str], Any]] = None,
        clock: Callable[[], float] = time.monotonic,
        cache_duration: float = CACHE_DURATION_SECONDS,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory or _default_client_factory
        self._client: Any = None
        self._clock = clock
        self._cache_duration = cache_duration
        self._cached_secrets: Optional[Dict[str, str]] = None
        self._cache_expiry: Optional[float] = None

    def _fallback_secrets(self) -> Dict[str, str]:
        s = self._settings
        return {
            "db_host": s.db_host,
            "db_port": s.db_port,
            "db_name": s.db_name,
            "db_user": s.db_user,
            "db_password": s.db_password,
        }

    def _fetch_remote(self) -> Dict[str, str]:
        if self._client is None:
            self._client = self._client_factory(self._settings.aws_region)  # type: ignore[arg-type]
        result = self._client.get_secret_value(SecretId=self._settings.secret_name)
        secrets = json.loads(result["SecretString"])
        if not isinstance(secrets, dict):
            raise ValueError("secret payload is not a JSON object")
        return secrets

    def _store(self, secrets: Dict[str, str]) -> Dict[str, str]:
        self._cached_secrets = secrets
        self._cache_expiry = self._clock() + self._cache_duration
        return secrets

    # PUBLIC_INTERFACE
    def get_secrets(self) -> Dict[str, str]:
        """Return the raw secret mapping, from cache when still valid."""
        if self._cached_secrets is not None and self._cache_expiry is not None:
            if self._clock() < self._cache_expiry:
                return self._cached_secrets

        if not (self._settings.is_production and self._settings.aws_region):
            logger.info("Using environment variables for database credentials")
            return self._store(self._fallback_secrets())

        try:
            logger.info("Fetching secrets from AWS Secrets Manager")
            secrets = self._fetch_remote()
        except Exception as e:  # noqa: BLE001
            logger.error("Failed to retrieve secrets: %s", e)
            logger.warning("Falling back to environment variables")
            return self._store(self._fallback_secrets())

        logger.info("Successfully retrieved secrets from AWS Secrets Manager")
        return self._store(secrets)

    # PUBLIC_INTERFACE
    def get_database_config(self) -> DatabaseConfig:
        """Return connection parameters built from the current secrets."""
        secrets = self.get_secrets()
        fallback = self._fallback_secrets()

        def pick(key: str) -> str:
            value = secrets.get(key)
            return str(value) if value not in (None, "") else fallback[key]

        try:
            port = int(pick("db_port"))
        except ValueError:
            port = 5432

        return DatabaseConfig(
            host=pick("db_host"),
            port=port,
            database=pick("db_name"),
            user=pick("db_user"),
            password=pick("db_password"),
            ssl_mode="require" if self._settings.is_production else "disable",
        )

    # PUBLIC_INTERFACE
    def clear_cache(self) -> None:
        """Drop the cached secrets so the next call fetches again."""
        self._cached_secrets = None
        self._cache_expiry = None
