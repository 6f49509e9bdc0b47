import pytest

from console import handle_command, screen


@pytest.mark.asyncio
async def test_add_expand_and_delete(controller, store):
    await controller.load()

    out = await handle_command(controller, "add buy milk | 2%")
    assert "buy milk" in out
    assert [t.name for t in store.list()] == ["buy milk"]

    out = await handle_command(controller, "1")
    assert out.splitlines()[1:] == ["  1 v buy milk", "        2%"]

    out = await handle_command(controller, "del 1")
    assert "(no todos)" in out
    assert store.list() == []


@pytest.mark.asyncio
async def test_blank_add_reports_and_changes_nothing(controller, store):
    await controller.load()
    assert await handle_command(controller, "add   ") == "todo name is required"
    assert store.list() == []


@pytest.mark.asyncio
async def test_bad_positions(controller):
    await controller.load()
    assert await handle_command(controller, "del 3") == "no todo at '3'"
    assert await handle_command(controller, "frobnicate") == "unknown command 'frobnicate'"


@pytest.mark.asyncio
async def test_quit(controller):
    assert await handle_command(controller, "quit") is None


@pytest.mark.asyncio
async def test_header_shows_fallback_mode(controller, transport):
    transport.down = True
    await controller.load()
    assert screen(controller).splitlines()[0] == "todos (local)"
