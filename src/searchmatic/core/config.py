from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Placeholder shipped in example env files; never a usable secret
_PLACEHOLDER_SECRET = "change-this-to-a-secure-random-string"


class Settings(BaseSettings):
    """Runtime configuration, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "Searchmatic API"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Record store
    database_url: str  # postgresql+asyncpg://...
    database_migrations_url: str | None = None  # role that owns tables and policies
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 100  # set 0 behind pgbouncer in transaction mode

    # Seconds to wait for in-flight requests on shutdown
    shutdown_grace_period: int = 30

    # Identity provider tokens; verified here, issued elsewhere
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None
    access_token_expire_minutes: int = 60  # only for tokens minted by create_access_token

    # Enumeration registry; registering over HTTP is disabled while unset
    enum_admin_api_key: str | None = None

    # Studies
    enforce_study_status_transitions: bool = False

    cors_origins: list[str] = ["http://localhost:5173"]

    # /metrics is open unless this is set
    metrics_api_key: str | None = None

    # Redis backs the stats cache only; stats are computed fresh without it
    redis_url: str | None = None
    redis_pool_size: int = 10
    stats_cache_ttl_seconds: int = 300

    @field_validator("jwt_secret_key")
    @classmethod
    def check_jwt_secret(cls, v: str) -> str:
        if v == _PLACEHOLDER_SECRET or len(v) < 32:
            raise ValueError(
                "JWT_SECRET_KEY must be the identity provider's signing secret "
                "(at least 32 characters)"
            )
        return v

    @field_validator("cors_origins")
    @classmethod
    def check_cors_origins(cls, v: list[str]) -> list[str]:
        # Credentials are allowed, so browsers would reject a wildcard anyway
        if "*" in v:
            raise ValueError("CORS_ORIGINS must list explicit origins, not '*'")
        return v

    @field_validator("stats_cache_ttl_seconds")
    @classmethod
    def check_stats_ttl(cls, v: int) -> int:
        if v < 1:
            raise ValueError("STATS_CACHE_TTL_SECONDS must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
