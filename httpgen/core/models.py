"""
Data model shared by the dispatcher, the executors and the sinks.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE")

# Only these methods ever transmit a body
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True)
class RequestSpec:
    """
    Immutable description of the request every execution sends.

    Built once before dispatch and shared read-only by all executions.
    """
    method: str
    url: str
    body: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = 10.0                   # Seconds, per attempt

    def __post_init__(self):
        # Freeze the header mapping so executions cannot mutate it
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def sends_body(self) -> bool:
        return self.method.upper() in BODY_METHODS

    def payload(self) -> Optional[bytes]:
        """Encoded body for POST, PUT and PATCH; None for every other method."""
        if not self.sends_body:
            return None
        return self.body.encode("utf-8")


@dataclass(frozen=True)
class RequestResult:
    """
    Terminal outcome of one execution.

    Either a success record (status, duration, response_length) or a
    failure record (error). Any fully drained response is a success,
    whatever its status code.
    """
    status: Optional[str] = None
    duration: Optional[float] = None        # Seconds spent in the call, body excluded
    response_length: Optional[int] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.error is None) == (self.status is None):
            raise ValueError("RequestResult must be either a success or a failure record")

    @classmethod
    def success(cls, status: str, duration: float, response_length: int) -> "RequestResult":
        return cls(status=status, duration=duration, response_length=response_length)

    @classmethod
    def failure(cls, error: str) -> "RequestResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if not self.ok:
            return {"error": self.error}
        return {
            "status": self.status,
            "duration": self.duration,
            "response_length": self.response_length,
        }
