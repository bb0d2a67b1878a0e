from gains_api.domain.referral_code_operations import (
    DEFAULT_PURCHASE_PAGE_SIZE,
    DuplicateCodeError,
    ReferralCodeOperations,
    referral_code_ops,
)

__all__ = [
    "DEFAULT_PURCHASE_PAGE_SIZE",
    "DuplicateCodeError",
    "ReferralCodeOperations",
    "referral_code_ops",
]
