"""
Custom exception hierarchy for httpgen package.

This module defines the error types raised while configuring a run and the
ones an execution converts into failure records. Only configuration and
sink-opening errors ever reach the caller; every per-request error is
absorbed by the executor.
"""

import asyncio
from enum import Enum
from typing import Optional

import aiohttp


class ErrorStage(Enum):
    """Stage of a single execution at which an error happened."""
    BUILD = "build"          # Request construction, nothing was sent
    TRANSPORT = "transport"  # Connection, protocol or timeout
    BODY = "body"            # Headers received, body draining failed


class HttpgenError(Exception):
    """Base exception class for all httpgen-related errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None, **kwargs):
        super().__init__(message)
        self.original_error = original_error
        self.metadata = kwargs

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (caused by: {self.original_error})"
        return base_msg


class ConfigError(HttpgenError):
    """
    Invalid run parameters.

    Raised before any sink is opened or request is sent.
    """

    def __init__(self, message: str = "Invalid configuration", **kwargs):
        super().__init__(message, **kwargs)


class SinkOpenError(HttpgenError):
    """
    A result store or error log could not be opened for writing.

    This is the only fatal error of a run and aborts it before dispatch.
    """

    def __init__(self, message: str = "Cannot open output", path: Optional[str] = None,
                 original_error: Optional[Exception] = None, **kwargs):
        super().__init__(message, original_error=original_error, path=path, **kwargs)
        self.path = path


class ExecutionError(HttpgenError):
    """Base class for errors that turn one execution into a failure record."""

    stage = ErrorStage.TRANSPORT
    log_prefix = "Error"

    @property
    def description(self) -> str:
        """Free-text description stored in the failure record."""
        if self.original_error is not None:
            text = str(self.original_error)
            if text:
                return text
        return super().__str__()

    def log_message(self) -> str:
        return f"{self.log_prefix}: {self.description}"


class RequestBuildError(ExecutionError):
    """The outbound request could not be constructed (bad method or URL)."""

    stage = ErrorStage.BUILD
    log_prefix = "Error creating request"

    def __init__(self, message: str = "Invalid request", **kwargs):
        super().__init__(message, **kwargs)


class TransportError(ExecutionError):
    """
    The call itself failed.

    This includes DNS failures, refused connections, protocol errors
    and the per-attempt timeout.
    """

    stage = ErrorStage.TRANSPORT
    log_prefix = "Error"

    def __init__(self, message: str = "Request failed", **kwargs):
        super().__init__(message, **kwargs)


class BodyReadError(ExecutionError):
    """Response headers arrived but the body could not be drained."""

    stage = ErrorStage.BODY
    log_prefix = "Error reading response body"

    def __init__(self, message: str = "Failed to read response body", **kwargs):
        super().__init__(message, **kwargs)


def classify_exception(exc: Exception, stage: ErrorStage = ErrorStage.TRANSPORT,
                       timeout: Optional[float] = None) -> ExecutionError:
    """
    Classify a generic exception into the matching ExecutionError type.

    Args:
        exc: The original exception to classify
        stage: Stage of the execution the exception was raised in
        timeout: Per-attempt timeout in seconds, used to describe timeouts

    Returns:
        ExecutionError: Classified exception carrying the original error
    """
    if isinstance(exc, ExecutionError):
        return exc

    # Total and socket timeouts share one description
    if isinstance(exc, (asyncio.TimeoutError, aiohttp.ServerTimeoutError)):
        limit = f" after {timeout:g}s" if timeout is not None else ""
        message = f"request timed out{limit}"
        if stage == ErrorStage.BODY:
            return BodyReadError(message)
        return TransportError(message)

    if stage == ErrorStage.BUILD or isinstance(exc, aiohttp.InvalidURL):
        return RequestBuildError(original_error=exc)

    if stage == ErrorStage.BODY or isinstance(exc, aiohttp.ClientPayloadError):
        return BodyReadError(original_error=exc)

    # Connection errors, protocol errors and anything unexpected
    return TransportError(original_error=exc)
