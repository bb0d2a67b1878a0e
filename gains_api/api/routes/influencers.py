"""Influencer dashboard API - code statistics, purchase history, admin creation."""

import logging
import uuid as uuid_pkg
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field

from gains_api.api.deps import DbSession
from gains_api.config import settings
from gains_api.core.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from gains_api.core.security import secrets_match
from gains_api.domain.referral_code_operations import (
    DEFAULT_PURCHASE_PAGE_SIZE,
    DuplicateCodeError,
    referral_code_ops,
)
from gains_api.models.referral_code import (
    COMMISSION_RATE_PLACES,
    MAX_CODE_LENGTH,
    MIN_CODE_LENGTH,
    normalize_code,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/influencer", tags=["influencer"])


# ─────────────────────────────────────────────────────────────────────────────
# Request/Response Schemas
# ─────────────────────────────────────────────────────────────────────────────


class CodeStatsResponse(BaseModel):
    """Aggregated ledger statistics for one code."""

    code: str
    total_signups: int
    total_purchases: int
    total_revenue: float
    total_commission: float  # total_revenue * current commission_rate
    commission_rate: float
    created_at: datetime | None = None
    last_used_at: datetime | None = None
    last_purchase_at: datetime | None = None


class PurchaseResponse(BaseModel):
    """One recorded purchase."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid_pkg.UUID
    user_id: str
    product_id: str
    amount: float
    commission: float  # snapshot at purchase time
    event_type: str
    created_at: datetime


class PurchaseListResponse(BaseModel):
    purchases: list[PurchaseResponse]


class CreateCodeRequest(BaseModel):
    """Admin request to register a new influencer code."""

    model_config = ConfigDict(populate_by_name=True)

    code: str | None = None
    admin_key: str | None = Field(default=None, alias="adminKey")
    commission_rate: Decimal | None = Field(default=None, alias="commissionRate")


class CreateCodeResponse(BaseModel):
    success: bool
    code: str


def parse_limit(raw: str | None) -> int:
    """Page size from the query string; unusable values fall back to the default.

    Only whole numbers are accepted: "1.5" is unusable, not truncated to 1.
    """
    if raw is None:
        return DEFAULT_PURCHASE_PAGE_SIZE
    try:
        limit = int(raw)
    except ValueError:
        return DEFAULT_PURCHASE_PAGE_SIZE
    return limit if limit > 0 else DEFAULT_PURCHASE_PAGE_SIZE


def decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0


# ─────────────────────────────────────────────────────────────────────────────
# Admin Endpoints
# ─────────────────────────────────────────────────────────────────────────────


@router.post("/create", response_model=CreateCodeResponse)
async def create_influencer_code(
    request: CreateCodeRequest,
    db: DbSession,
) -> CreateCodeResponse:
    """
    Create a new influencer code (admin only).

    The code length is validated before the admin key, so a code outside
    3..64 characters is always a 400 whatever key was sent.
    """
    code = normalize_code(request.code or "")
    if len(code) < MIN_CODE_LENGTH:
        raise InvalidArgumentError(f"Code must be at least {MIN_CODE_LENGTH} characters")
    if len(code) > MAX_CODE_LENGTH:
        raise InvalidArgumentError(f"Code must be at most {MAX_CODE_LENGTH} characters")

    if not secrets_match(request.admin_key, settings.admin_key):
        logger.warning(f"Rejected influencer code creation for {code}: bad admin key")
        raise UnauthorizedError()

    # A zero or missing rate means "use the default", matching how stats read it
    commission_rate = request.commission_rate or None
    if commission_rate is not None and not (Decimal("0") <= commission_rate <= Decimal("1")):
        raise InvalidArgumentError("Commission rate must be between 0 and 1")
    if commission_rate is not None and decimal_places(commission_rate) > COMMISSION_RATE_PLACES:
        raise InvalidArgumentError(
            f"Commission rate must have at most {COMMISSION_RATE_PLACES} decimal places"
        )

    try:
        referral = await referral_code_ops.create_code(db, code, commission_rate)
        await db.commit()
    except DuplicateCodeError:
        raise ConflictError("Code") from None

    logger.info(f"Created influencer code {referral.code} at rate {referral.commission_rate}")
    return CreateCodeResponse(success=True, code=referral.code)


# ─────────────────────────────────────────────────────────────────────────────
# Dashboard Endpoints
# ─────────────────────────────────────────────────────────────────────────────


@router.get("/{code}", response_model=CodeStatsResponse)
async def get_code_stats(
    code: str,
    db: DbSession,
) -> CodeStatsResponse:
    """
    Get statistics for an influencer code (case-insensitive).

    total_commission uses the code's current commission_rate, whereas each
    purchase record keeps the commission snapshot taken when it was recorded.
    """
    referral = await referral_code_ops.get_by_code(db, code)
    if not referral:
        raise NotFoundError("Code")

    return CodeStatsResponse(
        code=referral.code,
        total_signups=referral.total_signups or 0,
        total_purchases=referral.total_purchases or 0,
        total_revenue=float(referral.total_revenue or 0),
        total_commission=float(referral.total_commission),
        commission_rate=float(referral.effective_commission_rate),
        created_at=referral.created_at,
        last_used_at=referral.last_used_at,
        last_purchase_at=referral.last_purchase_at,
    )


@router.get("/{code}/purchases", response_model=PurchaseListResponse)
async def list_code_purchases(
    code: str,
    db: DbSession,
    limit: str | None = Query(default=None),
) -> PurchaseListResponse:
    """Get the most recent purchases for a code, newest first."""
    purchases = await referral_code_ops.list_purchases(db, code, parse_limit(limit))
    return PurchaseListResponse(
        purchases=[PurchaseResponse.model_validate(p) for p in purchases],
    )
