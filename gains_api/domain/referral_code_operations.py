"""Domain operations for the influencer referral code ledger."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gains_api.models.referral_code import (
    DEFAULT_COMMISSION_RATE,
    FLAT_PURCHASE_COMMISSION_RATE,
    PurchaseEventType,
    PurchaseRecord,
    ReferralCode,
    normalize_code,
)

DEFAULT_PURCHASE_PAGE_SIZE = 50


class DuplicateCodeError(ValueError):
    """Raised when creating a code that already exists."""


class ReferralCodeOperations:
    """
    Reads and writes for referral codes and their purchase records.

    Note: This doesn't extend a user-scoped CRUD base because codes are keyed
    by their uppercased string and the purchase path uses an upsert.
    """

    def __init__(self) -> None:
        self.model = ReferralCode

    async def get_by_code(
        self,
        db: AsyncSession,
        code: str,
    ) -> ReferralCode | None:
        """Get a referral code by its code string (case-insensitive)."""
        statement = select(ReferralCode).where(
            ReferralCode.code == normalize_code(code)  # type: ignore[arg-type]
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def create_code(
        self,
        db: AsyncSession,
        code: str,
        commission_rate: Decimal | None = None,
    ) -> ReferralCode:
        """
        Create a new referral code with zeroed counters.

        Raises DuplicateCodeError if the uppercased code already exists,
        including when a concurrent request wins the insert.
        """
        normalized = normalize_code(code)

        if await self.get_by_code(db, normalized):
            raise DuplicateCodeError(normalized)

        referral = ReferralCode(
            code=normalized,
            total_signups=0,
            total_purchases=0,
            total_revenue=Decimal("0"),
            commission_rate=(
                commission_rate if commission_rate is not None else DEFAULT_COMMISSION_RATE
            ),
            created_at=datetime.now(UTC),
            last_used_at=None,
            last_purchase_at=None,
        )
        db.add(referral)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise DuplicateCodeError(normalized) from None
        await db.refresh(referral)
        return referral

    async def record_purchase(
        self,
        db: AsyncSession,
        code: str,
        amount: Decimal,
        event_type: PurchaseEventType,
        user_id: str = "",
        product_id: str = "",
    ) -> PurchaseRecord:
        """
        Count a purchase against a code and append its purchase record.

        Uses PostgreSQL's INSERT ... ON CONFLICT DO UPDATE so the counter
        increment is computed from the stored row under a row lock: concurrent
        deliveries for the same code serialize instead of losing updates, and
        an unknown code is created on first purchase. The caller owns the
        transaction; both writes commit or roll back together.
        """
        normalized = normalize_code(code)
        now = datetime.now(UTC)

        upsert = (
            insert(self.model)
            .values(
                code=normalized,
                total_signups=0,
                total_purchases=1,
                total_revenue=amount,
                commission_rate=DEFAULT_COMMISSION_RATE,
                created_at=now,
                last_purchase_at=now,
            )
            .on_conflict_do_update(
                index_elements=["code"],
                set_={
                    "total_purchases": ReferralCode.total_purchases + 1,
                    "total_revenue": ReferralCode.total_revenue + amount,
                    "last_purchase_at": now,
                },
            )
        )
        await db.execute(upsert)

        purchase = PurchaseRecord(
            code=normalized,
            user_id=user_id,
            product_id=product_id,
            amount=amount,
            commission=amount * FLAT_PURCHASE_COMMISSION_RATE,
            event_type=event_type.value,
            created_at=now,
        )
        db.add(purchase)
        await db.flush()
        return purchase

    async def list_purchases(
        self,
        db: AsyncSession,
        code: str,
        limit: int = DEFAULT_PURCHASE_PAGE_SIZE,
    ) -> list[PurchaseRecord]:
        """Get the most recent purchases for a code, newest first."""
        statement = (
            select(PurchaseRecord)
            .where(PurchaseRecord.code == normalize_code(code))  # type: ignore[arg-type]
            .order_by(PurchaseRecord.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


# Singleton instance
referral_code_ops = ReferralCodeOperations()
