import asyncio
from typing import Optional

import aiohttp

from .config import RunConfig
from .core.dispatcher import Dispatcher
from .core.sinks import ErrorSink, ResultSink
from .core.statistics import StatisticsSnapshot


async def run_load_async(
        config: RunConfig,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> StatisticsSnapshot:
    """
    Open both outputs, then dispatch every request of the run.

    Raises SinkOpenError before any request is sent if either output
    cannot be opened.
    """
    with ResultSink(config.output) as result_sink, ErrorSink(config.error_log) as error_sink:
        dispatcher = Dispatcher(
            spec=config.to_request_spec(),
            total_requests=config.requests,
            launch_config=config.to_launch_config(),
            session=session,
            show_progress=config.show_progress,
        )
        return await dispatcher.dispatch(result_sink, error_sink)


def run_load(config: RunConfig) -> StatisticsSnapshot:
    return asyncio.run(run_load_async(config))


def format_duration(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.3f}s"
    return f"{seconds * 1000:.3f}ms"


def format_summary(snapshot: StatisticsSnapshot) -> str:
    lines = [
        "All requests completed",
        f"Total requests: {snapshot.request_count}",
        f"Failed requests: {snapshot.failure_count}",
        f"Average response time: {format_duration(snapshot.average_duration)}",
    ]
    return "\n".join(lines)
