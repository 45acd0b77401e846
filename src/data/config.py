"""
Database configuration using pydantic-settings.

Connection credentials come from the command line (defaulted from
config.yml); pool tuning and driver selection come from the environment.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class DatabaseSettings(BaseSettings):
    """
    Engine tuning loaded from environment variables.

    Environment variables:
        DB_DRIVER       - SQLAlchemy async dialect+driver (default: postgresql+asyncpg)
        DB_POOL_SIZE    - Connection pool size (default: 20)
        DB_MAX_OVERFLOW - Extra connections above the pool size (default: 10)
        DB_POOL_TIMEOUT - Seconds to wait for a pooled connection (default: 30)
        DB_POOL_RECYCLE - Seconds before a connection is recycled (default: 3600)
        DB_ECHO         - Echo SQL statements (default: false)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_driver: str = Field(default="postgresql+asyncpg")

    # Connection pool settings
    db_pool_size: int = Field(default=20, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_timeout: int = Field(default=30, ge=1, le=120)
    db_pool_recycle: int = Field(default=3600, ge=60)

    # Echo SQL queries (debug)
    db_echo: bool = Field(default=False)

    @field_validator("db_driver")
    @classmethod
    def validate_driver(cls, v: str) -> str:
        """Only async drivers can back the async engine."""
        if "+" not in v:
            raise ValueError("DB_DRIVER must name an async driver, e.g. postgresql+asyncpg")
        return v

    def get_engine_kwargs(self) -> dict:
        """Return SQLAlchemy engine configuration."""
        return {
            "pool_size": self.db_pool_size,
            "max_overflow": self.db_max_overflow,
            "pool_timeout": self.db_pool_timeout,
            "pool_recycle": self.db_pool_recycle,
            "echo": self.db_echo,
            "pool_pre_ping": True,  # Verify connections before using
        }


def build_database_url(
    user: str,
    password: str,
    proto: str,
    addr: str,
    name: str,
    driver: str = "postgresql+asyncpg",
) -> URL:
    """
    Build a connection URL from the individual database flags.

    ``proto`` is ``tcp`` (``addr`` is ``host`` or ``host:port``) or ``unix``
    (``addr`` is the socket directory, handed to the driver as ``host``).
    """
    if proto == "tcp":
        host, _, port = addr.rpartition(":") if ":" in addr else (addr, "", "")
        return URL.create(
            driver,
            username=user or None,
            password=password or None,
            host=host or None,
            port=int(port) if port else None,
            database=name,
        )
    if proto == "unix":
        return URL.create(
            driver,
            username=user or None,
            password=password or None,
            database=name,
            query={"host": addr},
        )
    raise ValueError(f"unsupported database protocol: {proto!r} (expected tcp or unix)")


@lru_cache
def get_settings() -> DatabaseSettings:
    """
    Cached settings singleton.

    Returns the same DatabaseSettings instance across the application.
    """
    return DatabaseSettings()
