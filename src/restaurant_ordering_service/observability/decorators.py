"""OpenTelemetry tracing decorators."""

import asyncio
import functools
import inspect
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from opentelemetry import trace

F = TypeVar("F", bound=Callable[..., Any])


def traced(
    span_name: str | None = None,
    service_name: str = "ordering-svc",
    attributes: Mapping[str, str] | None = None,
) -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a function.

    Creates a span around the decorated function. Exceptions are recorded on
    the span, marked as failures and re-raised. Works on sync and async
    functions.

    Args:
        span_name: Name for the span (defaults to the function name)
        service_name: Service name for span attributes
        attributes: Span attribute name -> argument name. The argument's value
            is copied onto the span when it is not None.

    Returns:
        Decorated function with tracing

    Example:
        @traced("orders.set_status", attributes={"order.id": "order_id"})
        async def set_status(self, order_id: str, status: str | None) -> Order:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)
        signature = inspect.signature(func)

        def _start(span: trace.Span, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
            span.set_attribute("service.name", service_name)
            if span_name:
                span.set_attribute("function.name", func.__name__)
            if not attributes:
                return

            bound = signature.bind_partial(*args, **kwargs).arguments
            for attribute, argument in attributes.items():
                value = bound.get(argument)
                if value is not None:
                    span.set_attribute(attribute, str(value))

        def _record_error(span: trace.Span, error: Exception) -> None:
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(error).__name__)
            span.set_attribute("error.message", str(error))
            span.record_exception(error)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                _start(span, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                    span.set_attribute("success", True)
                    return result
                except Exception as e:
                    _record_error(span, e)
                    raise

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                _start(span, args, kwargs)
                try:
                    result = func(*args, **kwargs)
                    span.set_attribute("success", True)
                    return result
                except Exception as e:
                    _record_error(span, e)
                    raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator
