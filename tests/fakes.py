import httpx

from store import StoreError

API_URL = "http://testserver/api"


class SwitchableTransport(httpx.AsyncBaseTransport):
    """
    Forwards requests to an ASGI app until ``down`` is set, then fails every
    request with a connection error as if the server had gone away.
    ``down_methods`` fails only requests with those HTTP methods.
    """

    def __init__(self, app) -> None:
        self._inner = httpx.ASGITransport(app=app)
        self.down = False
        self.down_methods: set[str] = set()
        self.requests: list[tuple[str, str]] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        if self.down or request.method in self.down_methods:
            raise httpx.ConnectError("backend down", request=request)
        return await self._inner.handle_async_request(request)


class BrokenLocalStore:
    """Local store whose medium is full: earlier data still reads back, every write fails."""

    def __init__(self, tasks) -> None:
        self.tasks = list(tasks)
        self.write_attempts = 0

    def read_tasks(self):
        return list(self.tasks)

    def read_next_id(self):
        return None

    def _fail(self):
        self.write_attempts += 1
        raise StoreError("quota exceeded")

    def save(self, tasks, next_id) -> None:
        self._fail()

    def put(self, task_id, name, description=""):
        self._fail()

    def remove(self, task_id):
        self._fail()
