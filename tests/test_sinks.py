import asyncio
import json
import re

import pytest

from httpgen.core.exceptions import SinkOpenError
from httpgen.core.models import RequestResult
from httpgen.core.sinks import STREAM_CLOSED, ErrorSink, ResultSink

TIMESTAMPED_LINE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(Z|[+-]\d{2}:\d{2}): (.*)$")


def drain_into(sink, items):
    async def scenario():
        queue = asyncio.Queue()
        consumer = asyncio.create_task(sink.drain(queue))
        for item in items:
            await queue.put(item)
        await queue.put(STREAM_CLOSED)
        return await consumer

    return asyncio.run(scenario())


def test_result_sink_writes_json_lines(tmp_path):
    path = tmp_path / "results.json"
    records = [
        RequestResult.success("200 OK", 0.1, 42),
        RequestResult.failure("connection reset"),
        RequestResult.success("404 Not Found", 0.2, 0),
    ]

    with ResultSink(str(path)) as sink:
        count = drain_into(sink, records)

    assert count == 3
    lines = path.read_text().splitlines()
    assert [json.loads(line) for line in lines] == [
        {"status": "200 OK", "duration": 0.1, "response_length": 42},
        {"error": "connection reset"},
        {"status": "404 Not Found", "duration": 0.2, "response_length": 0},
    ]


def test_result_sink_appends(tmp_path):
    path = tmp_path / "results.json"
    path.write_text('{"error": "earlier run"}\n')

    with ResultSink(str(path)) as sink:
        drain_into(sink, [RequestResult.failure("this run")])

    assert len(path.read_text().splitlines()) == 2


def test_error_sink_prefixes_timestamp(tmp_path):
    path = tmp_path / "errors.log"

    with ErrorSink(str(path)) as sink:
        drain_into(sink, ["Error: boom", "Error reading response body: eof"])

    lines = path.read_text().splitlines()
    assert len(lines) == 2
    messages = [TIMESTAMPED_LINE.match(line).group(2) for line in lines]
    assert messages == ["Error: boom", "Error reading response body: eof"]


def test_drain_stops_at_stream_closed(tmp_path):
    with ErrorSink(str(tmp_path / "errors.log")) as sink:
        assert drain_into(sink, []) == 0
        assert sink.written == 0


def test_open_failure_is_fatal(tmp_path):
    sink = ResultSink(str(tmp_path / "missing" / "results.json"))

    with pytest.raises(SinkOpenError) as excinfo:
        sink.open()

    assert excinfo.value.path == sink.path
    assert sink.closed


def test_write_requires_open_sink(tmp_path):
    with pytest.raises(RuntimeError):
        ResultSink(str(tmp_path / "results.json")).write(RequestResult.failure("x"))


def test_drain_survives_unexpected_format_errors(tmp_path, capsys):
    class BrokenSink(ResultSink):
        def format(self, item):
            if item.error == "bad":
                raise RuntimeError("cannot render")
            return super().format(item)

    path = tmp_path / "results.json"
    records = [RequestResult.failure("bad"), RequestResult.failure("good")]

    with BrokenSink(str(path)) as sink:
        count = drain_into(sink, records)

    assert count == 1
    assert path.read_text().splitlines() == ['{"error": "good"}']
    assert "cannot render" in capsys.readouterr().err
