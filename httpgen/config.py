"""
Run configuration.

RunConfig mirrors the command-line surface and turns it into the objects
the dispatch engine consumes.
"""

from dataclasses import dataclass, field
from typing import Dict

from .core.exceptions import ConfigError
from .core.models import HTTP_METHODS, RequestSpec
from .core.rate_limiter import LaunchConfig


def parse_headers(raw: str) -> Dict[str, str]:
    """
    Parse 'key1=value1,key2=value2' into a header mapping.

    Pairs without '=' are skipped; for duplicate keys the last pair wins.
    """
    headers: Dict[str, str] = {}
    if not raw:
        return headers
    for pair in raw.split(","):
        key, sep, value = pair.partition("=")
        if not sep:
            continue
        headers[key] = value
    return headers


@dataclass
class RunConfig:
    """Configuration for one load-generation run."""
    url: str = "http://example.com"
    requests: int = 10                      # Number of executions to launch
    method: str = "GET"
    body: str = ""                          # Sent for POST, PUT and PATCH only
    timeout: float = 10.0                   # Seconds, per request
    headers: Dict[str, str] = field(default_factory=dict)
    interval_ms: int = 0                    # Pause after each launch
    output: str = "results.json"
    error_log: str = "errors.log"
    max_concurrent: int = 5
    show_progress: bool = True

    def __post_init__(self):
        self.method = self.method.upper()
        if self.method not in HTTP_METHODS:
            raise ConfigError(
                f"Invalid method: {self.method}. Must be one of {', '.join(HTTP_METHODS)}"
            )
        if self.requests < 0:
            raise ConfigError(f"Number of requests must be >= 0, got {self.requests}")
        if self.max_concurrent < 1:
            raise ConfigError(f"Max concurrency must be >= 1, got {self.max_concurrent}")
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be > 0, got {self.timeout}")
        if self.interval_ms < 0:
            raise ConfigError(f"Interval must be >= 0, got {self.interval_ms}")

    def to_request_spec(self) -> RequestSpec:
        return RequestSpec(
            method=self.method,
            url=self.url,
            body=self.body,
            headers=self.headers,
            timeout=self.timeout,
        )

    def to_launch_config(self) -> LaunchConfig:
        return LaunchConfig(
            max_concurrent=self.max_concurrent,
            interval=self.interval_ms / 1000.0,
        )
