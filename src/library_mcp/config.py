"""Settings for the Library MCP Server.

Every field can be overridden with a ``LIBRARY_<FIELD>`` environment variable
or a line in a ``.env`` file in the working directory.
"""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseSettings):
    """Validated server settings.

    Groups the handshake identity, where the SQLite file lives, which
    transport to serve on, and how list and search tools page their output.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Identity ===

    server_name: str = Field(
        default="library",
        description="Name reported to MCP clients",
        min_length=3,
        max_length=50,
        pattern=r"^[a-z0-9-]+$",
    )
    server_version: str = Field(
        default="0.1.0",
        description="Semantic version reported to MCP clients",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    # === Storage ===

    database_path: Path = Field(
        default=Path("data/library.db"),
        description="Location of the SQLite file; relative paths use the working directory",
    )

    # === Transport ===

    transport: str = Field(
        default="stdio",
        description="stdio or streamable_http",
        pattern=r"^(stdio|streamable_http)$",
    )
    http_host: str = Field(default="127.0.0.1", description="Bind address for streamable_http")
    http_port: int = Field(
        default=8080, description="Bind port for streamable_http", ge=1024, le=65535
    )

    # === Paging ===

    default_page_size: int = Field(
        default=10, description="Page size when a tool call omits page_size", ge=1
    )
    max_page_size: int = Field(
        default=100, description="Upper bound on page_size for tool calls", ge=1
    )

    # === Diagnostics ===

    debug: bool = Field(default=False, description="Force DEBUG logging")
    log_level: str = Field(
        default="INFO",
        description="Root log level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )
    observability_enabled: bool = Field(
        default=True, description="Trace each tool call with a logfire span"
    )

    @field_validator("database_path")
    @classmethod
    def resolve_database_path(cls, value: Path) -> Path:
        """Make the path absolute and create its parent directory."""
        path = value.absolute()
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @model_validator(mode="after")
    def check_page_sizes(self) -> "ServerConfig":
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self

    @property
    def is_development(self) -> bool:
        return self.debug or self.log_level == "DEBUG"

    @property
    def server_info(self) -> dict[str, str]:
        return {
            "name": self.server_name,
            "version": self.server_version,
            "transport": self.transport,
        }

    def get_database_url(self) -> str:
        return f"sqlite:///{self.database_path}"


_config: ServerConfig | None = None


def get_config() -> ServerConfig:
    """Load the settings once and hand back the same object afterwards."""
    global _config  # noqa: PLW0603
    if _config is None:
        _config = ServerConfig()
    return _config


def reset_config() -> None:
    """Forget the loaded settings so the next ``get_config`` re-reads the environment."""
    global _config  # noqa: PLW0603
    _config = None
