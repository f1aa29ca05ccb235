import json
import aiohttp
import pytest

from liveness.modules.server.config import ServerConfig
from liveness.modules.server.health import HEALTH_BODY, HealthResponse, create_app
from liveness.modules.server.listener import Listener


def test_health_body_is_compact_json():
    """The payload is exactly {"alive":true}."""
    assert HEALTH_BODY == b'{"alive":true}'
    assert json.loads(HEALTH_BODY) == {"alive": True}
    assert HealthResponse().alive is True


def test_create_app_registers_health_route():
    """The health route is registered for any method."""
    app = create_app()
    routes = [(route.method, route.resource.canonical) for route in app.router.routes()]
    assert ("*", "/health") in routes


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
async def test_health_answers_every_method(method, test_logger):
    """Every method on /health gets a 200 with the liveness payload."""
    listener = Listener(ServerConfig(host="127.0.0.1", port="0"), test_logger)
    await listener.start()
    try:
        async with aiohttp.ClientSession() as session:
            async with session.request(
                method,
                f"http://127.0.0.1:{listener.port}/health",
                data=b"ignored request body",
            ) as resp:
                assert resp.status == 200
                assert resp.content_type == "application/json"
                assert await resp.read() == b'{"alive":true}'
    finally:
        await listener.stop()


@pytest.mark.asyncio
async def test_head_request_gets_headers_only(test_logger):
    """HEAD is answered with the same status and content type."""
    listener = Listener(ServerConfig(host="127.0.0.1", port="0"), test_logger)
    await listener.start()
    try:
        async with aiohttp.ClientSession() as session:
            async with session.head(f"http://127.0.0.1:{listener.port}/health") as resp:
                assert resp.status == 200
                assert resp.headers["Content-Type"] == "application/json"
    finally:
        await listener.stop()


@pytest.mark.asyncio
async def test_other_paths_are_not_found(test_logger):
    """Only the health route is served."""
    listener = Listener(ServerConfig(host="127.0.0.1", port="0"), test_logger)
    await listener.start()
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(f"http://127.0.0.1:{listener.port}/ready") as resp:
                assert resp.status == 404
    finally:
        await listener.stop()
