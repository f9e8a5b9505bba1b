"""Application configuration settings."""

from enum import Enum
from functools import lru_cache
from urllib.parse import quote

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseBackend(str, Enum):
    """Link store backends selectable at startup."""

    postgres = "postgres"
    sqlite = "sqlite"
    memory = "memory"


class Settings(BaseSettings):
    """Application settings loaded from ``LINKS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LINKS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    postgres_user: str = ""
    postgres_password: str = ""
    postgres_dbname: str = ""
    postgres_host: str = ""
    postgres_port: str = ""
    database_backend: DatabaseBackend = DatabaseBackend.postgres
    sqlite_path: str = "links.db"
    create_schema: bool = Field(
        default=False,
        description="Create the links table at startup instead of relying on migrations",
    )

    # Store deadlines, in seconds
    write_timeout: float = Field(default=1.0, gt=0)
    read_timeout: float = Field(default=0.2, gt=0)

    # Application
    app_title: str = "Link Shortener Service"
    app_version: str = "0.1.0"
    app_description: str = "Maps long URLs to short codes and redirects them back"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    shutdown_timeout: int = 10

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def missing_postgres_settings(self) -> list[str]:
        """Return the environment variable names of empty postgres settings."""
        fields = (
            "postgres_user",
            "postgres_password",
            "postgres_dbname",
            "postgres_host",
            "postgres_port",
        )
        return [
            f"LINKS_{name.upper()}" for name in fields if not getattr(self, name)
        ]

    @property
    def connection_string(self) -> str:
        """PostgreSQL DSN built from the individual connection settings."""
        user = quote(self.postgres_user, safe="")
        password = quote(self.postgres_password, safe="")
        dbname = quote(self.postgres_dbname, safe="")
        address = self.postgres_host
        if self.postgres_port:
            address = f"{address}:{self.postgres_port}"
        return f"postgresql://{user}:{password}@{address}/{dbname}?sslmode=disable"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
