"""
Core metrics and monitoring decorators for the context orchestrator.

This module defines Prometheus metrics and decorators for tracking:
- Request latency and counts
- Error rates (including degraded results that never reach the caller)
- End-to-end query processing time
- External API latency (LLM classification/completion and connector fetches)
- How often each connector is selected
"""

import time
import inspect
import functools
import logging
from typing import Optional, Callable
from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# Request metrics
REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, float("inf")]
)

# Error metrics
ERROR_COUNT = Counter(
    'error_total',
    'Total number of errors',
    ['type', 'location']  # type: e.g., 'classifier', 'connector', 'completion'; location: specific component
)

QUERY_PROCESSING_TIME = Histogram(
    'query_processing_duration_seconds',
    'Time spent resolving intent, fetching connectors and building the prompt',
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, float("inf")]
)

# External API metrics
LLM_REQUEST_TIME = Histogram(
    'llm_request_duration_seconds',
    'Time spent waiting for LLM API',
    ['model'],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, float("inf")]
)

CONNECTOR_FETCH_TIME = Histogram(
    'connector_fetch_duration_seconds',
    'Time spent waiting for a connector summary',
    ['connector'],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, float("inf")]
)

CONNECTOR_SELECTIONS = Counter(
    'connector_selections_total',
    'Number of times a connector was selected by intent resolution',
    ['connector']
)

def _observe(metric: Histogram, labels: Optional[Callable], args: tuple, duration: float, func_name: str) -> None:
    if labels and args:
        # For instance methods, first arg is 'self'
        metric.labels(**labels(args[0])).observe(duration)
    else:
        metric.observe(duration)
    logger.debug(f"Function {func_name} execution time: {duration:.2f} seconds")

def track_latency(metric: Histogram, labels: Optional[Callable] = None) -> Callable:
    """
    A decorator factory that tracks the execution time of a function using a Prometheus Histogram.

    Works for both plain functions and coroutine functions; for coroutines the
    measured time spans the whole await, including suspension.

    Args:
        metric (Histogram): The Prometheus Histogram to record the timing in
        labels (Callable, optional): Function receiving `self` that returns a metric labels dictionary

    Returns:
        Callable: The decorated function
    """
    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.perf_counter()
                try:
                    return await func(*args, **kwargs)
                finally:
                    _observe(metric, labels, args, time.perf_counter() - start_time, func.__name__)
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                _observe(metric, labels, args, time.perf_counter() - start_time, func.__name__)
        return wrapper
    return decorator

def track_errors(error_type: str, location: str) -> Callable:
    """
    A decorator factory that counts and logs exceptions raised by a function, then re-raises them.

    Args:
        error_type (str): Type of error (e.g., 'http', 'completion')
        location (str): Where the error occurred

    Returns:
        Callable: The decorated function

    Example:
        @track_errors('http', 'mcp_query')
        async def handle_query(req):
            ...
    """
    def record(e: Exception) -> None:
        ERROR_COUNT.labels(type=error_type, location=location).inc()
        logger.error(f"Error in {location} ({error_type}): {str(e)}", exc_info=True)

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    record(e)
                    raise
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                record(e)
                raise
        return wrapper
    return decorator

def record_degradation(error_type: str, location: str) -> None:
    """Count a failure that was absorbed and replaced by a fallback value."""
    ERROR_COUNT.labels(type=error_type, location=location).inc()
