"""Liveness responder for the /health route."""

from aiohttp import web
from pydantic import BaseModel

HEALTH_PATH = "/health"


class HealthResponse(BaseModel):
    alive: bool = True


# The payload never changes, so it is rendered once.
HEALTH_BODY = HealthResponse().model_dump_json().encode("utf-8")


async def health_handler(request: web.Request) -> web.Response:
    """Answer every method on the health route with {"alive":true}."""
    return web.Response(body=HEALTH_BODY, content_type="application/json")


def create_app() -> web.Application:
    """Create the application serving the health route for any method."""
    app = web.Application()
    app.router.add_route("*", HEALTH_PATH, health_handler)
    return app
