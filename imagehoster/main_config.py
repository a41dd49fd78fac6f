"""ImageHoster configuration with environment variables and mounted secrets support."""
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import quote_plus

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# LOCAL DEBUG OVERRIDE - Change this to test other environments locally
# =============================================================================
LOCAL_ENV_OVERRIDE: "Environment | None" = None  # e.g., Environment.UAT


# =============================================================================
# Mounted Secrets Config
# =============================================================================
# Secret path: /etc/{SECRETS_FOLDER_NAME}/{PROJECT_KEY}_{secret_name}
# e.g., /etc/secrets/imagehoster_database-password
SECRETS_FOLDER_NAME: str = os.getenv("SECRETS_FOLDER_NAME", "secrets")
PROJECT_KEY: str = os.getenv("PROJECT_KEY", "imagehoster")
SECRETS_BASE_PATH: str = f"/etc/{SECRETS_FOLDER_NAME}" if SECRETS_FOLDER_NAME else ""

ENV_FILES_DIR = Path(__file__).parent / "env_files"


class Environment(str, Enum):
    LOCAL = "local"
    DEV = "dev"
    TEST = "test"
    UAT = "uat"
    PROD = "prod"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


def read_secret_from_file(secret_name: str, base_path: str | None) -> str | None:
    """Read secret from a mounted file."""
    if not base_path:
        return None
    secret_path = Path(base_path) / secret_name
    if not secret_path.is_file():
        return None
    try:
        return secret_path.read_text().strip()
    except OSError:
        return None


def get_mounted_secret_name(secret_name: str) -> str:
    """Get mounted secret filename: {PROJECT_KEY}_{secret_name}"""
    return f"{PROJECT_KEY}_{secret_name}"


def get_secret(env_var: str, secret_file_name: str | None = None, default: str | None = None) -> str | None:
    """Get secret: mounted file > env var > {env_var}_FILE > default."""
    if secret_file_name and SECRETS_BASE_PATH:
        mounted_name = get_mounted_secret_name(secret_file_name)
        if value := read_secret_from_file(mounted_name, SECRETS_BASE_PATH):
            return value
    if value := os.getenv(env_var):
        return value
    if file_path := os.getenv(f"{env_var}_FILE"):
        if value := read_secret_from_file(Path(file_path).name, str(Path(file_path).parent)):
            return value
    return default


def get_current_environment() -> Environment:
    """Current environment from the ENV variable (defaults to LOCAL)."""
    try:
        return Environment(os.getenv("ENV", Environment.LOCAL.value))
    except ValueError:
        return Environment.LOCAL


def get_env_files(override: Environment | None = None) -> tuple[str, ...]:
    """Get .env files to load: base first, then environment-specific.

    The override only applies when ENV=local.
    """
    env = get_current_environment()
    if env == Environment.LOCAL and override:
        env = override
    return (str(ENV_FILES_DIR / ".env_base"), str(ENV_FILES_DIR / f".env_{env.value}"))


ENV_FILES = get_env_files(LOCAL_ENV_OVERRIDE)


# =============================================================================
# Config Classes
# =============================================================================

class DatabaseCredentials(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="DATABASE_", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str | None = Field(default=None)
    password: SecretStr | None = Field(default=None)
    db_name: str = "imagehoster"

    @model_validator(mode="before")
    @classmethod
    def _load_secrets(cls, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("user"):
            data["user"] = get_secret("DATABASE_USER", "database-user")
        if not data.get("password"):
            data["password"] = get_secret("DATABASE_PASSWORD", "database-password")
        return data


class DatabaseConfig(BaseSettings):
    """Database configuration with connection pooling settings."""
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="DATABASE_", extra="ignore")

    driver: str = "postgresql+asyncpg"
    # Full SQLAlchemy URL; bypasses credentials when set (e.g. sqlite+aiosqlite:///imagehoster.db)
    dsn: str | None = None
    create_schema: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 15
    pool_recycle: int = 900
    pool_pre_ping: bool = True
    echo: bool = False

    @property
    def credentials(self) -> DatabaseCredentials:
        return DatabaseCredentials()

    @property
    def url(self) -> str:
        """Build database URL from credentials."""
        if self.dsn:
            return self.dsn
        creds = self.credentials
        password = creds.password.get_secret_value() if creds.password else ""
        return f"{self.driver}://{creds.user}:{quote_plus(password)}@{creds.host}:{creds.port}/{creds.db_name}"

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class SessionConfig(BaseSettings):
    """HTTP session cookie settings."""
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="SESSION_", extra="ignore")

    cookie_name: str = "IMAGEHOSTER_SESSION"
    max_age_seconds: int = 1800
    cookie_secure: bool = False
    cookie_samesite: str = "lax"

    @field_validator("cookie_samesite")
    @classmethod
    def _valid_samesite(cls, v: str) -> str:
        v = v.lower()
        if v not in {"lax", "strict", "none"}:
            raise ValueError("cookie_samesite must be one of: lax, strict, none")
        return v


class CORSConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="CORS_", extra="ignore")

    allow_origins: str = "http://localhost:8000"
    allow_credentials: bool = True
    allow_methods: str = "*"
    allow_headers: str = "*"

    @property
    def origins_list(self) -> list[str]:
        return [o.strip() for o in self.allow_origins.split(",")]

    @property
    def methods_list(self) -> list[str]:
        return ["*"] if self.allow_methods == "*" else [m.strip() for m in self.allow_methods.split(",")]

    @property
    def headers_list(self) -> list[str]:
        return ["*"] if self.allow_headers == "*" else [h.strip() for h in self.allow_headers.split(",")]


class LoggingConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="LOG_", extra="ignore")

    level: str = "INFO"
    format: LogFormat = LogFormat.CONSOLE
    level_sqlalchemy: str = "WARNING"
    level_uvicorn_access: str = "INFO"


class FastAPIConfig(BaseSettings):
    """FastAPI application configuration."""
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="FASTAPI_", extra="ignore")

    title: str = "ImageHoster"
    description: str = "Upload, tag and comment on images"
    version: str = "0.1.0"
    docs_url: str | None = "/docs"
    redoc_url: str | None = None
    openapi_url: str | None = "/openapi.json"
    root_path: str = ""
    debug: bool = False

    @field_validator("docs_url", "redoc_url", "openapi_url")
    @classmethod
    def _disable_docs(cls, v: str | None) -> str | None:
        # Docs URLs can be disabled by setting to empty string in env
        return v if v else None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILES, extra="ignore")

    env: Environment = Field(default=Environment.LOCAL)
    app_name: str = Field(default="ImageHoster")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    @field_validator("debug", "reload")
    @classmethod
    def _no_debug_in_prod(cls, v: bool, info) -> bool:
        if info.data.get("env") == Environment.PROD and v:
            raise ValueError(f"{info.field_name} cannot be True in production")
        return v

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PROD

    @property
    def is_local(self) -> bool:
        return self.env == Environment.LOCAL


# =============================================================================
# Lazy Loaders (cached)
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    return Settings()

@lru_cache
def get_database_config() -> DatabaseConfig:
    return DatabaseConfig()

@lru_cache
def get_session_config() -> SessionConfig:
    return SessionConfig()

@lru_cache
def get_cors_config() -> CORSConfig:
    return CORSConfig()

@lru_cache
def get_logging_config() -> LoggingConfig:
    return LoggingConfig()

@lru_cache
def get_fastapi_config() -> FastAPIConfig:
    return FastAPIConfig()


# =============================================================================
# Global Instances
# =============================================================================

settings = get_settings()
database_config = get_database_config()
session_config = get_session_config()
cors_config = get_cors_config()
logging_config = get_logging_config()
fastapi_config = get_fastapi_config()
