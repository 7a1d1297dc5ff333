"""Application configuration using Pydantic settings."""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crypto_journal.schemas.analytics import Period


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Crypto Trading Journal"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = Field(default="INFO")

    # Database
    postgres_host: str = Field(default="localhost")
    postgres_port: int = Field(default=5432)
    postgres_user: str = Field(default="crypto_journal")
    postgres_password: str = Field(default="crypto_journal")
    postgres_db: str = Field(default="crypto_journal")
    database_url: str | None = Field(default=None, validate_default=True)

    @field_validator("database_url", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: str | None, values) -> str:
        """Build database URL from components if not provided."""
        if isinstance(v, str):
            return v

        data = values.data if hasattr(values, "data") else {}
        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=data.get("postgres_user", "crypto_journal"),
            password=data.get("postgres_password", "crypto_journal"),
            host=data.get("postgres_host", "localhost"),
            port=data.get("postgres_port", 5432),
            path=data.get("postgres_db", "crypto_journal"),
        ).unicode_string()

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_reload: bool = Field(default=True)
    api_base_url: str = Field(
        default="http://localhost:8000/api/v1", description="Base URL used by the CLI"
    )

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"]
    )

    # Analytics
    timezone: str = Field(default="UTC", description="IANA zone used for day boundaries")
    currency_symbol: str = Field(default="$")
    equity_label_format: str = Field(default="%b %d", description="strftime format for equity labels")
    default_period: Period = Field(default=Period.MONTHLY, description="Period used when none is requested")

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """Reject unknown IANA zone names early."""
        try:
            ZoneInfo(v)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def zoneinfo(self) -> ZoneInfo:
        """Timezone object for the configured zone name."""
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
