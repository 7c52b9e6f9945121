from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "school_admin"
    serverless: bool = Field(
        default=False,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )
    dsn: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy URL overriding the host/port/database fields.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.dsn:
            return self.dsn
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class SecurityConfig(BaseSettings):
    """JWT and application security configuration."""

    jwt_secret_key: SecretStr = Field(
        default=SecretStr("change-me"),
        validation_alias="JWT_SECRET",
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expires_minutes: int = Field(
        default=60,
        validation_alias="JWT_EXPIRATION_MINUTES",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class I18nConfig(BaseSettings):
    """Location of the per-language translation files."""

    lang_path: str = "lang"
    default_language: str = "en"

    model_config = SettingsConfigDict(
        env_prefix="I18N_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class CacheConfig(BaseSettings):
    """Read-through cache configuration."""

    settings_ttl_seconds: int = Field(default=3600, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class BootstrapAdminConfig(BaseSettings):
    """Credentials for the administrator created by the seed step."""

    name: str = "Super Admin"
    email: str = "admin@school.com"
    password: SecretStr = Field(default=SecretStr("password"))

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "School Administration API"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    seed_on_startup: bool = True

    # Listings
    per_page: int = Field(default=15, ge=1)
    max_per_page: int = Field(default=100, ge=1)

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Security
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    # Translations
    i18n: I18nConfig = Field(default_factory=I18nConfig)

    # Caching
    cache: CacheConfig = Field(default_factory=CacheConfig)

    # Seeded administrator
    admin: BootstrapAdminConfig = Field(default_factory=BootstrapAdminConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
