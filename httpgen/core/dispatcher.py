"""
Bounded-concurrency dispatcher.

The dispatcher launches exactly N executions of one RequestSpec. A launch
waits for a free concurrency token, so the launch rate follows the
completion rate once the pool is exhausted. Result and error streams are
drained concurrently by their sinks and closed only after every launched
execution has finished.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import List, Optional

import aiohttp
from tqdm import tqdm

from .executors import BaseExecutor, RequestExecutor
from .models import RequestSpec
from .rate_limiter import LaunchConfig, TokenPool
from .sinks import STREAM_CLOSED, BaseSink
from .statistics import Statistics, StatisticsSnapshot


# Idle keep-alive connections are dropped after this many seconds
KEEPALIVE_TIMEOUT = 30.0


class Dispatcher:
    """
    Launches N executions under a concurrency ceiling.

    Features:
    - Token pool of max_concurrent permits, held for a whole execution
    - Optional fixed pause after each launch
    - Stream capacity equal to max_concurrent
    - No fail-fast: a failed execution never stops the remaining launches
    """

    def __init__(
        self,
        spec: RequestSpec,
        total_requests: int,
        launch_config: Optional[LaunchConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        statistics: Optional[Statistics] = None,
        show_progress: bool = False
    ):
        """
        Initialize dispatcher.

        Args:
            spec: Request sent by every execution
            total_requests: Number of executions to launch
            launch_config: Concurrency ceiling and inter-launch interval
            session: Session to send requests with; one is created per run if omitted
            statistics: Aggregator to report into; a fresh one if omitted
            show_progress: Whether to display a tqdm progress bar
        """
        if total_requests < 0:
            raise ValueError(f"total_requests must be >= 0, got {total_requests}")

        self.spec = spec
        self.total_requests = total_requests
        self.launch_config = launch_config or LaunchConfig()
        self.session = session
        self.statistics = statistics or Statistics()
        self.show_progress = show_progress

        self.tokens: Optional[TokenPool] = None
        self.progress_bar: Optional[tqdm] = None
        self.launched = 0
        self.completed = 0

    @property
    def stream_capacity(self) -> int:
        """Bound of the result and error queues."""
        return self.launch_config.max_concurrent

    @asynccontextmanager
    async def _session_scope(self):
        if self.session is not None:
            yield self.session
            return
        connector = aiohttp.TCPConnector(
            limit=self.launch_config.max_concurrent,
            keepalive_timeout=KEEPALIVE_TIMEOUT,
        )
        async with aiohttp.ClientSession(connector=connector, auto_decompress=False) as session:
            yield session

    def _init_progress_bar(self) -> None:
        if self.show_progress:
            self.progress_bar = tqdm(total=self.total_requests, desc="Requests", ncols=100)

    def _close_progress_bar(self) -> None:
        if self.progress_bar:
            self.progress_bar.close()
            self.progress_bar = None

    def make_executor(self, session, results: asyncio.Queue, errors: asyncio.Queue) -> BaseExecutor:
        return RequestExecutor(self.spec, session, results, errors, self.statistics)

    async def _run_one(self, executor: BaseExecutor, index: int) -> None:
        """Execute one launch; owns the token acquired for it."""
        try:
            await executor.execute(index)
        finally:
            self.tokens.release()
            self.completed += 1
            if self.progress_bar:
                self.progress_bar.update(1)

    async def _launch_all(self, executor: BaseExecutor) -> None:
        tasks: List[asyncio.Task] = []
        for index in range(self.total_requests):
            await self.tokens.acquire()
            tasks.append(asyncio.create_task(self._run_one(executor, index)))
            self.launched += 1
            await self.tokens.pace()

        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                tqdm.write(f"Execution crashed: {outcome!r}")

    async def dispatch(self, result_sink: BaseSink, error_sink: BaseSink) -> StatisticsSnapshot:
        """
        Launch every execution and drain both streams to completion.

        Args:
            result_sink: Open sink consuming the result stream
            error_sink: Open sink consuming the error stream

        Returns:
            StatisticsSnapshot taken after the last record was drained
        """
        self.tokens = TokenPool(self.launch_config)
        self.launched = 0
        self.completed = 0
        results: asyncio.Queue = asyncio.Queue(maxsize=self.stream_capacity)
        errors: asyncio.Queue = asyncio.Queue(maxsize=self.stream_capacity)

        consumers = [
            asyncio.create_task(result_sink.drain(results)),
            asyncio.create_task(error_sink.drain(errors)),
        ]

        self._init_progress_bar()
        try:
            try:
                async with self._session_scope() as session:
                    executor = self.make_executor(session, results, errors)
                    await self._launch_all(executor)
            finally:
                # Every launched execution has finished; close the streams
                await results.put(STREAM_CLOSED)
                await errors.put(STREAM_CLOSED)
                await asyncio.gather(*consumers)
        finally:
            self._close_progress_bar()

        return self.statistics.snapshot()
