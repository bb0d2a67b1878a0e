"""
Purchase event processor for RevenueCat webhooks.

Turns a webhook payload into at most one ledger mutation: an upsert of the
referral code's counters plus one appended purchase record, committed as a
single transaction.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from gains_api.core.exceptions import DatabaseUnavailableError
from gains_api.domain.referral_code_operations import referral_code_ops
from gains_api.models.referral_code import (
    MAX_CODE_LENGTH,
    MAX_PURCHASE_AMOUNT,
    normalize_code,
)
from gains_api.services.revenuecat.events import (
    classify_event_type,
    get_event_body,
    get_raw_event_type,
    parse_purchase_event,
)

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    PROCESSED = "processed"
    ACKNOWLEDGED_ONLY = "acknowledged_only"


class SkipReason(str, Enum):
    """Why a webhook was acknowledged without touching the ledger."""

    NOT_A_PURCHASE = "not_a_purchase"
    NO_REFERRAL_CODE = "no_referral_code"
    CODE_TOO_LONG = "code_too_long"
    PRICE_OUT_OF_RANGE = "price_out_of_range"


@dataclass(frozen=True)
class WebhookOutcome:
    """Result of handling one webhook delivery.

    Both variants are answered with a success status so RevenueCat does not
    redeliver; only ``PROCESSED`` means the ledger changed.
    """

    kind: OutcomeKind
    reason: SkipReason | None = None
    code: str | None = None

    @classmethod
    def processed(cls, code: str) -> "WebhookOutcome":
        return cls(kind=OutcomeKind.PROCESSED, code=code)

    @classmethod
    def acknowledged_only(cls, reason: SkipReason) -> "WebhookOutcome":
        return cls(kind=OutcomeKind.ACKNOWLEDGED_ONLY, reason=reason)

    @property
    def is_processed(self) -> bool:
        return self.kind is OutcomeKind.PROCESSED

    def to_response(self) -> dict[str, bool]:
        return {"received": True, "processed": self.is_processed}


class PurchaseEventProcessor:
    """Applies RevenueCat purchase events to the referral ledger."""

    async def process(
        self,
        db: AsyncSession | None,
        payload: Any,
    ) -> WebhookOutcome:
        """
        Handle one (already authenticated) webhook payload.

        Args:
            db: Session for the ledger, or None when no database is configured.
            payload: Decoded JSON body as sent by RevenueCat.

        Returns:
            WebhookOutcome describing whether the ledger was mutated.

        Raises:
            DatabaseUnavailableError: a purchase needs recording but there is no store.
        """
        event = get_event_body(payload)
        raw_type = get_raw_event_type(event)
        logger.info(f"RevenueCat webhook received: {raw_type}")
        logger.debug(f"Full event data: {json.dumps(payload, default=str)}")

        event_type = classify_event_type(raw_type)
        if event_type is None:
            logger.info(f"Event type {raw_type} is not a purchase event, skipping")
            return WebhookOutcome.acknowledged_only(SkipReason.NOT_A_PURCHASE)

        purchase = parse_purchase_event(event, event_type)
        logger.info(
            f"Purchase: {purchase.product_id} - ${purchase.price} - "
            f"Code: {purchase.referral_code or '-'}"
        )

        if not purchase.referral_code:
            return WebhookOutcome.acknowledged_only(SkipReason.NO_REFERRAL_CODE)

        # Values the ledger columns cannot hold are acknowledged, never stored
        if len(normalize_code(purchase.referral_code)) > MAX_CODE_LENGTH:
            logger.warning(
                f"Referral code longer than {MAX_CODE_LENGTH} characters, skipping: "
                f"{purchase.referral_code[:MAX_CODE_LENGTH]}..."
            )
            return WebhookOutcome.acknowledged_only(SkipReason.CODE_TOO_LONG)
        if purchase.price > MAX_PURCHASE_AMOUNT:
            logger.warning(
                f"Purchase price {purchase.price} for code {purchase.referral_code} "
                f"exceeds {MAX_PURCHASE_AMOUNT}, skipping"
            )
            return WebhookOutcome.acknowledged_only(SkipReason.PRICE_OUT_OF_RANGE)

        if db is None:
            logger.error(
                f"Cannot record purchase for code {purchase.referral_code}: database not configured"
            )
            raise DatabaseUnavailableError()

        try:
            record = await referral_code_ops.record_purchase(
                db,
                code=purchase.referral_code,
                amount=purchase.price,
                event_type=purchase.event_type,
                user_id=purchase.app_user_id,
                product_id=purchase.product_id,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(f"Influencer purchase tracked: {record.code} - ${record.amount}")
        return WebhookOutcome.processed(record.code)


purchase_event_processor = PurchaseEventProcessor()
