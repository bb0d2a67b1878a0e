"""Influencer referral code ledger - codes and their purchase history."""

import uuid as uuid_pkg
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, SQLModel

DEFAULT_COMMISSION_RATE = Decimal("0.20")

# Purchase records always snapshot commission at this flat rate, regardless of
# the code's own commission_rate (statistics use the code's current rate).
FLAT_PURCHASE_COMMISSION_RATE = Decimal("0.20")

MIN_CODE_LENGTH = 3
MAX_CODE_LENGTH = 64

# Money columns are Numeric(14, 4); commission_rate is Numeric(5, 4).
MAX_PURCHASE_AMOUNT = Decimal("9999999999.9999")
COMMISSION_RATE_PLACES = 4


class PurchaseEventType(str, Enum):
    """RevenueCat event types that count as a purchase."""

    INITIAL_PURCHASE = "INITIAL_PURCHASE"
    RENEWAL = "RENEWAL"
    PRODUCT_CHANGE = "PRODUCT_CHANGE"
    NON_RENEWING_PURCHASE = "NON_RENEWING_PURCHASE"


def normalize_code(code: str) -> str:
    """Canonical form of a referral code (codes are case-insensitive)."""
    return code.strip().upper()


class ReferralCode(SQLModel, table=True):
    """
    One row per influencer referral code.

    Counters are only ever moved by the purchase webhook; the admin API
    creates rows with zeroed counters.
    """

    __tablename__ = "referral_codes"
    __table_args__ = (
        CheckConstraint("total_purchases >= 0", name="ck_referral_codes_purchases_non_negative"),
        CheckConstraint("total_signups >= 0", name="ck_referral_codes_signups_non_negative"),
        CheckConstraint("total_revenue >= 0", name="ck_referral_codes_revenue_non_negative"),
        CheckConstraint(
            "commission_rate >= 0 AND commission_rate <= 1",
            name="ck_referral_codes_commission_rate_range",
        ),
    )

    code: str = Field(
        sa_column=Column(String(MAX_CODE_LENGTH), primary_key=True, nullable=False),
    )
    total_signups: int = Field(default=0, nullable=False)
    total_purchases: int = Field(default=0, nullable=False)
    total_revenue: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 4), nullable=False, server_default=text("0")),
    )
    commission_rate: Decimal = Field(
        default=DEFAULT_COMMISSION_RATE,
        sa_column=Column(Numeric(5, 4), nullable=False, server_default=text("0.20")),
    )
    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )
    last_used_at: datetime | None = Field(  # type: ignore[call-overload]
        default=None,
        nullable=True,
        sa_type=DateTime(timezone=True),
    )
    last_purchase_at: datetime | None = Field(  # type: ignore[call-overload]
        default=None,
        nullable=True,
        sa_type=DateTime(timezone=True),
    )

    @property
    def effective_commission_rate(self) -> Decimal:
        """Stored rate, falling back to the default when unset or zero."""
        return self.commission_rate or DEFAULT_COMMISSION_RATE

    @property
    def total_commission(self) -> Decimal:
        """Commission owed at the code's current rate."""
        return (self.total_revenue or Decimal("0")) * self.effective_commission_rate


class PurchaseRecord(SQLModel, table=True):
    """
    Append-only record of one accepted purchase webhook.

    Never updated or deleted by the application.
    """

    __tablename__ = "referral_purchases"
    __table_args__ = (Index("ix_referral_purchases_code_created", "code", "created_at"),)

    id: uuid_pkg.UUID = Field(
        default_factory=uuid_pkg.uuid4,
        sa_column=Column(
            PG_UUID(as_uuid=True),
            primary_key=True,
            nullable=False,
            server_default=text("gen_random_uuid()"),
        ),
    )
    code: str = Field(
        sa_column=Column(
            String(MAX_CODE_LENGTH),
            ForeignKey("referral_codes.code", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    user_id: str = Field(default="", max_length=255, nullable=False)
    product_id: str = Field(default="", max_length=255, nullable=False)
    amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 4), nullable=False),
    )
    commission: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 4), nullable=False),
    )
    event_type: str = Field(max_length=50, nullable=False)
    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )
