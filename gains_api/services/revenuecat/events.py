"""
RevenueCat webhook payload parsing.

RevenueCat posts an envelope of the form ``{"api_version": ..., "event": {...}}``.
Only a handful of fields matter to the referral ledger; every one of them is
optional and parsing never rejects an event for a missing field.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from gains_api.models.referral_code import PurchaseEventType

# (map name, attribute key) pairs probed for the referral code, in priority order.
# The app has written the code under several spellings over time.
REFERRAL_CODE_LOCATIONS: tuple[tuple[str, str], ...] = (
    ("subscriber_attributes", "$influencerCode"),
    ("subscriber_attributes", "$referralCode"),
    ("subscriber_attributes", "influencerCode"),
    ("subscriber_attributes", "referralCode"),
    ("attributes", "$influencerCode"),
    ("attributes", "$referralCode"),
)

CodeExtractor = Callable[[Mapping[str, Any]], str | None]


def attribute_extractor(map_name: str, key: str) -> CodeExtractor:
    """Build a strategy reading ``event[map_name][key]["value"]``."""

    def extract(event: Mapping[str, Any]) -> str | None:
        attributes = event.get(map_name)
        if not isinstance(attributes, Mapping):
            return None
        entry = attributes.get(key)
        if not isinstance(entry, Mapping):
            return None
        value = entry.get("value")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    return extract


REFERRAL_CODE_EXTRACTORS: tuple[CodeExtractor, ...] = tuple(
    attribute_extractor(map_name, key) for map_name, key in REFERRAL_CODE_LOCATIONS
)


@dataclass
class PurchaseEvent:
    """The parts of a RevenueCat purchase event the ledger cares about."""

    event_type: PurchaseEventType
    referral_code: str | None
    price: Decimal
    product_id: str
    app_user_id: str


def get_event_body(payload: Any) -> Mapping[str, Any]:
    """Return the inner ``event`` object, or an empty mapping if malformed."""
    if not isinstance(payload, Mapping):
        return {}
    event = payload.get("event")
    return event if isinstance(event, Mapping) else {}


def get_raw_event_type(event: Mapping[str, Any]) -> str | None:
    event_type = event.get("type")
    return event_type if isinstance(event_type, str) else None


def classify_event_type(raw_type: str | None) -> PurchaseEventType | None:
    """Map a RevenueCat event type onto the purchase allow-list."""
    if raw_type is None:
        return None
    try:
        return PurchaseEventType(raw_type)
    except ValueError:
        return None


def extract_referral_code(
    event: Mapping[str, Any],
    extractors: tuple[CodeExtractor, ...] = REFERRAL_CODE_EXTRACTORS,
) -> str | None:
    """Try each extraction strategy in order; the first non-empty value wins."""
    for extract in extractors:
        code = extract(event)
        if code:
            return code
    return None


def parse_price(value: Any) -> Decimal:
    """Convert the event price to Decimal; absent or unusable prices count as 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        # str() first so 9.99 becomes Decimal("9.99"), not its binary expansion
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not price.is_finite() or price < 0:
        return Decimal("0")
    return price


def _string_field(event: Mapping[str, Any], key: str) -> str:
    value = event.get(key)
    if value is None:
        return ""
    return str(value)


def parse_purchase_event(
    event: Mapping[str, Any],
    event_type: PurchaseEventType,
) -> PurchaseEvent:
    """Pull the ledger-relevant fields out of an already-classified event."""
    return PurchaseEvent(
        event_type=event_type,
        referral_code=extract_referral_code(event),
        price=parse_price(event.get("price")),
        product_id=_string_field(event, "product_id"),
        app_user_id=_string_field(event, "app_user_id"),
    )
