"""Root conftest - test infrastructure for all backend tests.

Provides:
- Deterministic settings (no real database, known secrets) set before import
- A mocked AsyncSession fixture
- API clients with dependency overrides (ledger available / unavailable)
- Autouse guard that keeps the AI gateways from reaching the network
"""

from __future__ import annotations

import os

# Must run before gains_api.config is imported anywhere: Settings() is built at
# import time, and an empty DATABASE_URL means no engine is created.
os.environ["DATABASE_URL"] = ""
os.environ["ADMIN_KEY"] = "test-admin-key"
os.environ["REVENUECAT_WEBHOOK_SECRET"] = "test-webhook-secret"
os.environ["CLAUDE_API_KEY"] = "test-claude-key"
os.environ["PERPLEXITY_API_KEY"] = "test-perplexity-key"

from unittest.mock import AsyncMock, MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

ADMIN_KEY = os.environ["ADMIN_KEY"]
WEBHOOK_SECRET = os.environ["REVENUECAT_WEBHOOK_SECRET"]


# ─────────────────────────────────────────────────────────────────────────────
# Mocked Database Session
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_db() -> AsyncMock:
    """An AsyncSession stand-in; tests program execute() results per case."""
    db = AsyncMock()
    db.add = MagicMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


# ─────────────────────────────────────────────────────────────────────────────
# API Clients
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
async def api_client(mock_db: AsyncMock):
    """HTTP client whose database dependencies yield the mocked session."""
    from gains_api.core.database import get_db, get_optional_db
    from gains_api.main import app

    async def override_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_optional_db] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def no_db_client():
    """HTTP client against an app with no ledger database configured."""
    from gains_api.main import app

    app.dependency_overrides.clear()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ─────────────────────────────────────────────────────────────────────────────
# External Service Guard (autouse)
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def mock_external_services():
    """SAFETY: never call the real AI gateways from API tests.

    Only the route-level singletons are patched; gateway unit tests build
    their own ClaudeGateway / PerplexityGateway instances.
    """
    with (
        patch("gains_api.api.routes.ai.claude_gateway", new_callable=MagicMock) as mock_claude,
        patch(
            "gains_api.api.routes.ai.perplexity_gateway", new_callable=MagicMock
        ) as mock_perplexity,
    ):
        mock_claude.analyze_image = AsyncMock(return_value="claude reply")
        mock_perplexity.chat = AsyncMock(return_value="perplexity reply")
        yield {"claude": mock_claude, "perplexity": mock_perplexity}
