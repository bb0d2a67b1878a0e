"""Influencer dashboard endpoint tests."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

from httpx import AsyncClient

from gains_api.domain.referral_code_operations import DuplicateCodeError
from tests.helpers.mock_factories import make_purchase, make_referral_code


# ─────────────────────────────────────────────────────────────────────────────
# GET /api/influencer/{code}
# ─────────────────────────────────────────────────────────────────────────────


async def test_stats_for_existing_code(api_client: AsyncClient, influencer_ops):
    """Commission is derived from revenue and the code's current rate."""
    influencer_ops.get_by_code.return_value = make_referral_code(
        total_signups=4,
        total_purchases=1,
        total_revenue=Decimal("9.99"),
        last_purchase_at=datetime(2026, 2, 1, tzinfo=UTC),
    )

    resp = await api_client.get("/api/influencer/summer10")

    assert resp.status_code == 200
    data = resp.json()
    assert data["code"] == "SUMMER10"
    assert data["total_signups"] == 4
    assert data["total_purchases"] == 1
    assert data["total_revenue"] == 9.99
    assert data["total_commission"] == 1.998
    assert data["commission_rate"] == 0.2
    assert data["last_used_at"] is None
    assert influencer_ops.get_by_code.call_args.args[1] == "summer10"


async def test_stats_missing_rate_uses_default(api_client: AsyncClient, influencer_ops):
    influencer_ops.get_by_code.return_value = make_referral_code(
        commission_rate=Decimal("0"), total_revenue=Decimal("100")
    )

    resp = await api_client.get("/api/influencer/SUMMER10")

    assert resp.status_code == 200
    assert resp.json()["commission_rate"] == 0.2
    assert resp.json()["total_commission"] == 20.0


async def test_stats_unknown_code(api_client: AsyncClient, influencer_ops):
    resp = await api_client.get("/api/influencer/NOPE")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Code not found"}


async def test_stats_without_database(no_db_client: AsyncClient):
    resp = await no_db_client.get("/api/influencer/SUMMER10")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Database not available"}


# ─────────────────────────────────────────────────────────────────────────────
# GET /api/influencer/{code}/purchases
# ─────────────────────────────────────────────────────────────────────────────


async def test_purchases_listed(api_client: AsyncClient, influencer_ops):
    purchase = make_purchase()
    influencer_ops.list_purchases.return_value = [purchase]

    resp = await api_client.get("/api/influencer/summer10/purchases")

    assert resp.status_code == 200
    (item,) = resp.json()["purchases"]
    assert item["id"] == str(purchase.id)
    assert item["amount"] == 9.99
    assert item["commission"] == 1.998
    assert item["event_type"] == "INITIAL_PURCHASE"
    assert influencer_ops.list_purchases.call_args.args[1:] == ("summer10", 50)


async def test_purchases_empty(api_client: AsyncClient, influencer_ops):
    resp = await api_client.get("/api/influencer/NEWCODE/purchases")

    assert resp.status_code == 200
    assert resp.json() == {"purchases": []}


async def test_purchases_respects_limit(api_client: AsyncClient, influencer_ops):
    await api_client.get("/api/influencer/SUMMER10/purchases?limit=5")

    assert influencer_ops.list_purchases.call_args.args[2] == 5


async def test_purchases_bad_limit_falls_back(api_client: AsyncClient, influencer_ops):
    for raw in ("abc", "0", "-3"):
        await api_client.get(f"/api/influencer/SUMMER10/purchases?limit={raw}")
        assert influencer_ops.list_purchases.call_args.args[2] == 50


# ─────────────────────────────────────────────────────────────────────────────
# POST /api/influencer/create
# ─────────────────────────────────────────────────────────────────────────────


async def test_create_code(api_client: AsyncClient, influencer_ops, admin_key, mock_db):
    influencer_ops.create_code.return_value = make_referral_code(code="SPRING25")

    resp = await api_client.post(
        "/api/influencer/create",
        json={"code": " spring25 ", "adminKey": admin_key, "commissionRate": 0.25},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "code": "SPRING25"}
    args = influencer_ops.create_code.call_args.args
    assert args[1] == "SPRING25"
    assert args[2] == Decimal("0.25")
    mock_db.commit.assert_awaited()


async def test_create_code_default_rate(api_client: AsyncClient, influencer_ops, admin_key):
    influencer_ops.create_code.return_value = make_referral_code(code="FALL")

    resp = await api_client.post(
        "/api/influencer/create", json={"code": "fall", "adminKey": admin_key}
    )

    assert resp.status_code == 200
    assert influencer_ops.create_code.call_args.args[2] is None


async def test_create_short_code_checked_before_key(api_client: AsyncClient, influencer_ops):
    resp = await api_client.post(
        "/api/influencer/create", json={"code": "ab", "adminKey": "wrong"}
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Code must be at least 3 characters"}
    influencer_ops.create_code.assert_not_awaited()


async def test_create_missing_code(api_client: AsyncClient, influencer_ops, admin_key):
    resp = await api_client.post("/api/influencer/create", json={"adminKey": admin_key})

    assert resp.status_code == 400


async def test_create_wrong_admin_key(api_client: AsyncClient, influencer_ops):
    resp = await api_client.post(
        "/api/influencer/create", json={"code": "SPRING25", "adminKey": "nope"}
    )

    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}
    influencer_ops.create_code.assert_not_awaited()


async def test_create_missing_admin_key(api_client: AsyncClient, influencer_ops):
    resp = await api_client.post("/api/influencer/create", json={"code": "SPRING25"})

    assert resp.status_code == 401
    influencer_ops.create_code.assert_not_awaited()


async def test_create_rate_out_of_range(api_client: AsyncClient, influencer_ops, admin_key):
    resp = await api_client.post(
        "/api/influencer/create",
        json={"code": "SPRING25", "adminKey": admin_key, "commissionRate": 1.5},
    )

    assert resp.status_code == 400
    influencer_ops.create_code.assert_not_awaited()


async def test_create_duplicate_code(api_client: AsyncClient, influencer_ops, admin_key):
    influencer_ops.create_code.side_effect = DuplicateCodeError("SUMMER10")

    resp = await api_client.post(
        "/api/influencer/create", json={"code": "summer10", "adminKey": admin_key}
    )

    assert resp.status_code == 409
    assert resp.json() == {"error": "Code already exists"}


async def test_create_over_long_code_rejected(api_client: AsyncClient, influencer_ops):
    """Length limits apply before the admin key, at both ends."""
    resp = await api_client.post(
        "/api/influencer/create", json={"code": "A" * 100, "adminKey": "wrong"}
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Code must be at most 64 characters"}
    influencer_ops.create_code.assert_not_awaited()


async def test_create_code_at_max_length(api_client: AsyncClient, influencer_ops, admin_key):
    influencer_ops.create_code.return_value = make_referral_code(code="A" * 64)

    resp = await api_client.post(
        "/api/influencer/create", json={"code": "a" * 64, "adminKey": admin_key}
    )

    assert resp.status_code == 200
    assert influencer_ops.create_code.call_args.args[1] == "A" * 64


async def test_create_rate_too_precise(api_client: AsyncClient, influencer_ops, admin_key):
    resp = await api_client.post(
        "/api/influencer/create",
        json={"code": "SPRING25", "adminKey": admin_key, "commissionRate": "0.12345"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Commission rate must have at most 4 decimal places"}
    influencer_ops.create_code.assert_not_awaited()


async def test_create_rate_with_trailing_zeros(
    api_client: AsyncClient, influencer_ops, admin_key
):
    influencer_ops.create_code.return_value = make_referral_code(code="SPRING25")

    resp = await api_client.post(
        "/api/influencer/create",
        json={"code": "SPRING25", "adminKey": admin_key, "commissionRate": "0.123400"},
    )

    assert resp.status_code == 200
    assert influencer_ops.create_code.call_args.args[2] == Decimal("0.1234")


def test_parse_limit_accepts_whole_numbers_only():
    from gains_api.api.routes.influencers import parse_limit

    assert parse_limit("7") == 7
    assert parse_limit("1.5") == 50
    assert parse_limit(None) == 50
