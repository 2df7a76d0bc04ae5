"""
Monitoring package initializer.

This package exposes Prometheus metrics and helper decorators for tracking
query processing, LLM calls and connector fetches.
"""

from .metrics import (
    REQUEST_COUNT,
    REQUEST_LATENCY,
    ERROR_COUNT,
    QUERY_PROCESSING_TIME,
    LLM_REQUEST_TIME,
    CONNECTOR_FETCH_TIME,
    CONNECTOR_SELECTIONS,
    track_latency,
    track_errors,
    record_degradation,
)

__all__ = [
    'REQUEST_COUNT',
    'REQUEST_LATENCY',
    'ERROR_COUNT',
    'QUERY_PROCESSING_TIME',
    'LLM_REQUEST_TIME',
    'CONNECTOR_FETCH_TIME',
    'CONNECTOR_SELECTIONS',
    'track_latency',
    'track_errors',
    'record_degradation',
]
