"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - PORT and DB_NAME have no defaults: absence is startup-fatal
    - get_settings() is cached (lru_cache) - single instance per process
    - load_settings() never leaks pydantic.ValidationError: it raises StartupError

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - PORT keeps the "host:port" / ":port" form so existing deployments keep working
"""

from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from listapp.core.errors import StartupError


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Process
    port: str
    db_name: str

    # Assets
    static_dir: Path = Path("static")
    templates_dir: Path | None = None

    # Storage
    query_timeout_seconds: float = 10.0

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("port")
    @classmethod
    def check_port(cls, v: str) -> str:
        parse_listen_address(v)
        return v.strip()

    @field_validator("db_name")
    @classmethod
    def check_db_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("DB_NAME cannot be empty")
        return v

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v

    @field_validator("query_timeout_seconds")
    @classmethod
    def check_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("QUERY_TIMEOUT_SECONDS must be positive")
        return v

    @property
    def listen_address(self) -> tuple[str, int]:
        return parse_listen_address(self.port)


def parse_listen_address(value: str) -> tuple[str, int]:
    """Split a listen address into (host, port).

    Accepts "8080", ":8080" and "host:8080". An empty host binds all
    interfaces.
    """
    value = value.strip()
    host, sep, port = value.rpartition(":")
    if not sep:
        host, port = "", value
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"invalid listen address {value!r}")
    return host.strip("[]") or "0.0.0.0", int(port)


def load_settings(**overrides) -> Settings:
    """Build Settings, converting validation failures into StartupError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(loc) for loc in err["loc"]) or "settings"
            for err in e.errors()
        )
        raise StartupError(f"invalid or missing settings: {fields}", "config") from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
