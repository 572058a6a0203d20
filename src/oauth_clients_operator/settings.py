"""Operator settings loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Operator configuration.

    Only tunables live here. Object names the operator reads or manages are
    constants in ``oauth_clients_operator.constants``.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Emit JSON formatted log records",
    )
    metrics_port: int = Field(
        default=9090,
        ge=1,
        le=65535,
        validation_alias="METRICS_PORT",
        description="Port for the Prometheus metrics server",
    )
    conflict_retry_attempts: int = Field(
        default=5,
        ge=1,
        validation_alias="CONFLICT_RETRY_ATTEMPTS",
        description="Fetch-compare-update attempts before giving up on write conflicts",
    )
    resync_interval_seconds: float = Field(
        default=300.0,
        gt=0,
        validation_alias="RESYNC_INTERVAL_SECONDS",
        description="Interval of the periodic full resync",
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the singleton settings instance.

    Returns:
        The Settings instance.
    """
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = Settings()
    return _settings
