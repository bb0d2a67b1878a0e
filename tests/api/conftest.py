"""API test fixtures - auth headers and ledger operation mocks.

Builds on root conftest fixtures (mock_db, api_client, no_db_client,
mock_external_services). Ledger operations are patched where the routes
look them up, so tests control what the "database" returns.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from gains_api.config import settings


@pytest.fixture
def webhook_headers() -> dict[str, str]:
    """Authorization header RevenueCat sends with the configured secret."""
    return {"Authorization": f"Bearer {settings.revenuecat_webhook_secret}"}


@pytest.fixture
def admin_key() -> str:
    return settings.admin_key


@pytest.fixture
def influencer_ops():
    """ReferralCodeOperations as seen by the influencer routes."""
    with patch("gains_api.api.routes.influencers.referral_code_ops", new_callable=MagicMock) as ops:
        ops.get_by_code = AsyncMock(return_value=None)
        ops.create_code = AsyncMock()
        ops.list_purchases = AsyncMock(return_value=[])
        yield ops


@pytest.fixture
def ledger_ops():
    """ReferralCodeOperations as seen by the webhook processor."""
    with patch(
        "gains_api.services.revenuecat.processor.referral_code_ops", new_callable=MagicMock
    ) as ops:
        ops.record_purchase = AsyncMock()
        yield ops
