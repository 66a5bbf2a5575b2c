# Core dispatch engine
from .core.dispatcher import Dispatcher
from .core.executors import RequestExecutor
from .core.rate_limiter import LaunchConfig, TokenPool
from .core.models import RequestSpec, RequestResult
from .core.statistics import Statistics, StatisticsSnapshot
from .core.sinks import ResultSink, ErrorSink
from .core.exceptions import (
    HttpgenError,
    ConfigError,
    SinkOpenError,
    RequestBuildError,
    TransportError,
    BodyReadError
)

# Run configuration and helpers
from .config import RunConfig, parse_headers
from .easy_use import run_load, format_summary

__version__ = "0.1.0"
