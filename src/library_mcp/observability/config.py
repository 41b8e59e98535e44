"""Logfire settings, read from ``LOGFIRE_*`` environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ObservabilityConfig(BaseSettings):
    """Where and whether tool spans are exported.

    Without ``LOGFIRE_TOKEN`` spans stay local.
    """

    model_config = SettingsConfigDict(env_prefix="LOGFIRE_", extra="ignore")

    token: str = ""
    service_name: str = "library-mcp"
    environment: str = "development"
    enabled: bool = True
    console: bool = False

    @property
    def send_to_logfire(self) -> bool:
        return bool(self.token)
