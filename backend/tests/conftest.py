"""Test fixtures for Entity Encoder backend tests."""

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.fixture()
def app():
    """The FastAPI app, with metrics cleared between tests."""
    from entity_encoder.main import app as _app
    from entity_encoder.metrics import metrics

    metrics.reset()
    yield _app
    metrics.reset()


@pytest.fixture()
async def client(app):
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def sample_texts():
    """Texts covering markup, Latin-1, Greek and existing references."""
    return [
        "plain text",
        "<script>alert('xss')</script>",
        "café crème brûlée",
        "Δx ≤ ε",
        "5¢ &amp; &#162;",
        "",
        None,
    ]
