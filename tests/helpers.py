import asyncio
from contextlib import asynccontextmanager

from aiohttp import web
from aiohttp.test_utils import TestServer


class TrackingHandler:
    """aiohttp handler recording what it received and how many calls overlapped."""

    def __init__(self, delay=0.0, status=200, body=b"hello", slow_calls=(), slow_delay=1.0):
        self.delay = delay
        self.status = status
        self.body = body
        self.slow_calls = set(slow_calls)
        self.slow_delay = slow_delay
        self.calls = 0
        self.active = 0
        self.peak = 0
        self.bodies = []
        self.methods = []
        self.headers = []

    async def __call__(self, request):
        self.calls += 1
        call = self.calls
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            self.methods.append(request.method)
            self.headers.append(dict(request.headers))
            self.bodies.append(await request.read())
            delay = self.slow_delay if call in self.slow_calls else self.delay
            if delay:
                await asyncio.sleep(delay)
            return web.Response(status=self.status, body=self.body)
        finally:
            self.active -= 1


@asynccontextmanager
async def serve(handler):
    """Run handler on every method and path of a local test server; yields its base URL."""
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handler)
    async with TestServer(app) as server:
        yield str(server.make_url("/"))


class FakeResponse:
    def __init__(self, status=200, reason="OK", body=b"", read_error=None):
        self.status = status
        self.reason = reason
        self.body = body
        self.read_error = read_error
        self.released = False

    async def read(self):
        if self.read_error is not None:
            raise self.read_error
        return self.body

    def release(self):
        self.released = True


class FakeSession:
    """
    Stand-in for aiohttp.ClientSession.

    `outcome` is called with the 1-based call number and returns either a
    FakeResponse or an exception to raise.
    """

    def __init__(self, outcome=None, delay=0.0):
        self.outcome = outcome or (lambda call: FakeResponse(body=b"ok"))
        self.delay = delay
        self.calls = []
        self.responses = []

    async def request(self, **kwargs):
        self.calls.append(kwargs)
        call = len(self.calls)
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.outcome(call)
        if isinstance(outcome, BaseException):
            raise outcome
        self.responses.append(outcome)
        return outcome


def drain_queue(queue):
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items
