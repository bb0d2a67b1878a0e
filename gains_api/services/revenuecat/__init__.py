"""RevenueCat webhook handling: payload parsing and ledger updates."""

from gains_api.services.revenuecat.events import (
    REFERRAL_CODE_EXTRACTORS,
    REFERRAL_CODE_LOCATIONS,
    PurchaseEvent,
    extract_referral_code,
    parse_price,
    parse_purchase_event,
)
from gains_api.services.revenuecat.processor import (
    OutcomeKind,
    PurchaseEventProcessor,
    SkipReason,
    WebhookOutcome,
    purchase_event_processor,
)

__all__ = [
    "REFERRAL_CODE_EXTRACTORS",
    "REFERRAL_CODE_LOCATIONS",
    "PurchaseEvent",
    "extract_referral_code",
    "parse_price",
    "parse_purchase_event",
    "OutcomeKind",
    "PurchaseEventProcessor",
    "SkipReason",
    "WebhookOutcome",
    "purchase_event_processor",
]
