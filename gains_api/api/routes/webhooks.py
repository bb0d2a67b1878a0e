"""Inbound webhooks from the billing provider."""

import logging

from fastapi import APIRouter, Header, Request

from gains_api.api.deps import OptionalDbSession
from gains_api.config import settings
from gains_api.core.exceptions import InternalError, UnauthorizedError
from gains_api.core.security import bearer_matches
from gains_api.services.revenuecat.processor import purchase_event_processor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


def _verify_webhook_secret(authorization: str | None) -> None:
    """Check the bearer secret RevenueCat sends, when one is configured."""
    if not settings.webhook_auth_enabled:
        return
    if not bearer_matches(authorization, settings.revenuecat_webhook_secret):
        logger.warning("RevenueCat webhook auth failed")
        raise UnauthorizedError()


@router.post("/revenuecat-webhook")
async def handle_revenuecat_webhook(
    request: Request,
    db: OptionalDbSession,
    authorization: str | None = Header(default=None),
) -> dict[str, bool]:
    """
    Handle RevenueCat webhook events.

    Purchase-type events carrying an influencer code update that code's
    ledger. Everything else is acknowledged with processed=false and a 200,
    so RevenueCat does not keep redelivering events we intentionally ignore.
    """
    _verify_webhook_secret(authorization)

    try:
        payload = await request.json()
    except ValueError as e:
        raise InternalError(f"Invalid webhook payload: {e}") from None

    outcome = await purchase_event_processor.process(db, payload)
    return outcome.to_response()
