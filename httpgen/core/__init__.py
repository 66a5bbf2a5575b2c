"""
Core module for httpgen package.

This module contains the request-dispatch engine:
- Custom exception hierarchy
- Request and result models
- Thread-safe statistics
- Concurrency token pool
- Request executors, dispatcher and stream sinks
"""

from .exceptions import (
    HttpgenError,
    ConfigError,
    SinkOpenError,
    ExecutionError,
    RequestBuildError,
    TransportError,
    BodyReadError,
)

from .models import HTTP_METHODS, BODY_METHODS, RequestSpec, RequestResult
from .statistics import Statistics, StatisticsSnapshot
from .rate_limiter import LaunchConfig, TokenPool
from .executors import BaseExecutor, RequestExecutor
from .sinks import STREAM_CLOSED, BaseSink, ResultSink, ErrorSink
from .dispatcher import Dispatcher

__all__ = [
    # Exceptions
    'HttpgenError',
    'ConfigError',
    'SinkOpenError',
    'ExecutionError',
    'RequestBuildError',
    'TransportError',
    'BodyReadError',
    # Models
    'HTTP_METHODS',
    'BODY_METHODS',
    'RequestSpec',
    'RequestResult',
    'Statistics',
    'StatisticsSnapshot',
    # Engine
    'LaunchConfig',
    'TokenPool',
    'BaseExecutor',
    'RequestExecutor',
    'Dispatcher',
    # Sinks
    'STREAM_CLOSED',
    'BaseSink',
    'ResultSink',
    'ErrorSink',
]
