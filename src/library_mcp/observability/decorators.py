"""Span decorator for tool handlers."""

import functools
import time
from collections.abc import Awaitable, Callable
from typing import Any

import logfire

from ..config import get_config

Handler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]

_SCALARS = (str, int, float, bool)


def trace_tool(tool_name: str) -> Callable[[Handler], Handler]:
    """Run the handler inside a ``tool.execution.<tool_name>`` logfire span.

    The span carries the tool category, each scalar argument as ``input.<key>``,
    whether the call succeeded, its duration and, for paged results, the total
    number of matches. With ``observability_enabled`` off no span is opened.
    """

    def decorator(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(arguments: dict[str, Any]) -> dict[str, Any]:
            if not get_config().observability_enabled:
                return await handler(arguments)

            with logfire.span(
                f"tool.execution.{tool_name}",
                tool_name=tool_name,
                tool_category=_categorize_tool(tool_name),
            ) as span:
                if isinstance(arguments, dict):
                    for key, value in arguments.items():
                        if isinstance(value, _SCALARS):
                            span.set_attribute(f"input.{key}", value)

                started = time.perf_counter()
                try:
                    result = await handler(arguments)
                except Exception as e:
                    span.set_attribute("tool.success", False)
                    span.set_attribute("tool.error", str(e))
                    raise
                _record_result(span, result, time.perf_counter() - started)
                return result

        return wrapper

    return decorator


def _categorize_tool(tool_name: str) -> str:
    if "lend" in tool_name or "return" in tool_name:
        return "lending"
    if "search" in tool_name:
        return "discovery"
    if "report" in tool_name:
        return "reporting"
    return "catalog"


def _record_result(span, result: Any, elapsed: float) -> None:
    payload = result if isinstance(result, dict) else {}
    span.set_attribute("tool.success", not payload.get("isError", False))
    span.set_attribute("tool.duration_ms", elapsed * 1000)

    pagination = (payload.get("data") or {}).get("pagination")
    if isinstance(pagination, dict) and "total" in pagination:
        span.set_attribute("result.total", pagination["total"])
