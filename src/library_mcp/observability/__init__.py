"""Logfire tracing for tool calls."""

import logging

import logfire

from .config import ObservabilityConfig
from .decorators import trace_tool

logger = logging.getLogger(__name__)

_active: ObservabilityConfig | None = None


def initialize_observability(config: ObservabilityConfig | None = None) -> None:
    """Point logfire at the configured project; a disabled config leaves it untouched."""
    global _active  # noqa: PLW0603
    _active = config or ObservabilityConfig()
    if not _active.enabled:
        logger.debug("Logfire left unconfigured (LOGFIRE_ENABLED=false)")
        return

    logfire.configure(
        token=_active.token or None,
        service_name=_active.service_name,
        environment=_active.environment,
        send_to_logfire=_active.send_to_logfire,
        console=None if _active.console else False,
    )
    logger.info(
        "Tracing %s in %s (export=%s)",
        _active.service_name,
        _active.environment,
        _active.send_to_logfire,
    )


def get_observability_config() -> ObservabilityConfig:
    """The settings last passed to ``initialize_observability``, or fresh ones."""
    return _active or ObservabilityConfig()


__all__ = [
    "ObservabilityConfig",
    "get_observability_config",
    "initialize_observability",
    "trace_tool",
]
