from gains_api.models.referral_code import (
    DEFAULT_COMMISSION_RATE,
    FLAT_PURCHASE_COMMISSION_RATE,
    MIN_CODE_LENGTH,
    PurchaseEventType,
    PurchaseRecord,
    ReferralCode,
    normalize_code,
)

__all__ = [
    "DEFAULT_COMMISSION_RATE",
    "FLAT_PURCHASE_COMMISSION_RATE",
    "MIN_CODE_LENGTH",
    "PurchaseEventType",
    "PurchaseRecord",
    "ReferralCode",
    "normalize_code",
]
