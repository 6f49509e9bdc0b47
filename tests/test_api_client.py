import json

import httpx
import pytest

from api_client import BackendError, TodoApiClient
from models import Task


def client_for(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TodoApiClient("http://api.test/api/", client=http)


@pytest.mark.asyncio
async def test_fetch_all_parses_tasks():
    def handler(request):
        assert request.url == "http://api.test/api/todos"
        return httpx.Response(200, json=[{"id": 1, "name": "a", "description": ""}])

    assert await client_for(handler).fetch_all() == [Task(id=1, name="a")]


@pytest.mark.asyncio
async def test_create_posts_name_and_description():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.read())
        return httpx.Response(201, json={"id": 3, "name": "a", "description": "b"})

    task = await client_for(handler).create("a", "b")
    assert task == Task(id=3, name="a", description="b")
    assert seen["body"] == {"name": "a", "description": "b"}


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404, 500, 503])
async def test_error_status_raises_backend_error(status):
    api = client_for(lambda request: httpx.Response(status, json={"error": "nope"}))
    with pytest.raises(BackendError) as excinfo:
        await api.delete(1)
    assert excinfo.value.status_code == status


@pytest.mark.asyncio
async def test_transport_error_raises_backend_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(BackendError) as excinfo:
        await client_for(handler).fetch_all()
    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_timeout_raises_backend_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(BackendError):
        await client_for(handler).create("a")


@pytest.mark.asyncio
async def test_unexpected_body_raises_backend_error():
    api = client_for(lambda request: httpx.Response(200, text="<html>proxy</html>"))
    with pytest.raises(BackendError):
        await api.fetch_all()
    with pytest.raises(BackendError):
        await api.create("a")


@pytest.mark.asyncio
async def test_owned_client_is_closed_on_exit():
    async with TodoApiClient("http://api.test/api") as api:
        pass
    assert api._client.is_closed
