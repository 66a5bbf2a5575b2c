"""
Request executors.

An executor performs exactly one attempt of the configured request,
classifies its outcome and reports it: one record on the result stream,
one statistics update and, for failures only, one line on the error stream.
"""

import asyncio
import re
import time
from abc import ABC, abstractmethod
from typing import Optional

import aiohttp
from yarl import URL

from .exceptions import (
    ErrorStage, ExecutionError, RequestBuildError, classify_exception
)
from .models import HTTP_METHODS, RequestResult, RequestSpec
from .statistics import Statistics


# RFC 9110 token characters; values may not contain line breaks or NUL
_HEADER_NAME = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+\Z")
_FORBIDDEN_VALUE_CHARS = re.compile(r"[\r\n\x00]")


class BaseExecutor(ABC):
    """
    Abstract base class for request executors.

    Provides the reporting side shared by every executor: emitting the
    result record, the error line and the statistics update.
    """

    def __init__(
        self,
        spec: RequestSpec,
        results: asyncio.Queue,
        errors: asyncio.Queue,
        statistics: Optional[Statistics] = None
    ):
        """
        Initialize base executor.

        Args:
            spec: The request every execution sends
            results: Stream receiving one RequestResult per execution
            errors: Stream receiving one message per failed execution
            statistics: Shared aggregator updated once per execution
        """
        self.spec = spec
        self.results = results
        self.errors = errors
        self.statistics = statistics or Statistics()

    async def _report_success(self, status: str, duration: float, length: int) -> RequestResult:
        result = RequestResult.success(status, duration, length)
        await self.results.put(result)
        self.statistics.record_success(duration)
        return result

    async def _report_failure(self, error: ExecutionError) -> RequestResult:
        result = RequestResult.failure(error.description)
        await self.errors.put(error.log_message())
        await self.results.put(result)
        self.statistics.record_failure()
        return result

    @abstractmethod
    async def execute(self, index: int) -> RequestResult:
        """
        Run one attempt and report its outcome.

        Args:
            index: Launch number of this execution, starting at 0

        Returns:
            The RequestResult that was emitted
        """
        pass


class RequestExecutor(BaseExecutor):
    """
    aiohttp-based executor for a single HTTP attempt.

    Features:
    - Request validated before anything is sent
    - Body attached for POST, PUT and PATCH only
    - Fresh timeout budget per attempt
    - Duration covers the call up to the response headers, not the body
    - Any drained response is a success, whatever its status code
    """

    def __init__(self, spec: RequestSpec, session: aiohttp.ClientSession, *args, **kwargs):
        super().__init__(spec, *args, **kwargs)
        self.session = session

    def build_request(self) -> dict:
        """
        Construct the keyword arguments of the outbound call.

        Raises:
            RequestBuildError: The method, URL or headers cannot form a request
        """
        method = self.spec.method.upper()
        if method not in HTTP_METHODS:
            raise RequestBuildError(f"unsupported method {self.spec.method!r}")

        try:
            url = URL(self.spec.url)
        except (TypeError, ValueError) as exc:
            raise RequestBuildError(original_error=exc) from exc
        if not url.is_absolute() or url.scheme not in ("http", "https") or not url.host:
            raise RequestBuildError(f"invalid URL {self.spec.url!r}")

        headers = {}
        for name, value in self.spec.headers.items():
            if not _HEADER_NAME.match(name):
                raise RequestBuildError(f"invalid header name {name!r}")
            if _FORBIDDEN_VALUE_CHARS.search(value):
                raise RequestBuildError(f"invalid value for header {name!r}")
            headers[name] = value

        return {
            "method": method,
            "url": url,
            "data": self.spec.payload(),
            "headers": headers,
            "timeout": aiohttp.ClientTimeout(total=self.spec.timeout),
        }

    async def execute(self, index: int) -> RequestResult:
        try:
            request = self.build_request()
        except RequestBuildError as error:
            return await self._report_failure(error)

        start = time.perf_counter()
        try:
            response = await self.session.request(**request)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error = classify_exception(exc, ErrorStage.TRANSPORT, timeout=self.spec.timeout)
            return await self._report_failure(error)
        duration = time.perf_counter() - start

        try:
            body = await response.read()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error = classify_exception(exc, ErrorStage.BODY, timeout=self.spec.timeout)
            return await self._report_failure(error)
        finally:
            response.release()

        status = f"{response.status} {response.reason or ''}".strip()
        return await self._report_success(status, duration, len(body))
