"""Tests for CustomerRiskService profiles."""

from decimal import Decimal

import pytest

from core.domain.entities import CustomerAccount, Order, OrderItem, PaymentDetails, ShippingAddress
from core.domain.enums import OrderStatus, RiskTier
from core.domain.result import ErrorKind
from core.domain.value_objects import CommissionSnapshot, OrderNumber


def make_order(status: OrderStatus, email="karim@example.com", phone="01811111111", user_id=None) -> Order:
    return Order(
        order_number=OrderNumber.generate(),
        items=[
            OrderItem(
                product_id="p1",
                quantity=1,
                unit_price=Decimal("100"),
                commission=CommissionSnapshot.none(Decimal("100")),
            )
        ],
        shipping_address=ShippingAddress(
            first_name="Karim",
            last_name="Ahmed",
            email=email,
            phone=phone,
            address="Road 1",
            city="Chattogram",
            postal_code="4000",
        ),
        payment_method="cod",
        payment_details=PaymentDetails(method="cod"),
        total=Decimal("100"),
        user_id=user_id,
        order_status=status,
    )


async def seed(orders, statuses, **kwargs):
    for status in statuses:
        await orders.add(make_order(status, **kwargs))


class TestRiskProfile:
    @pytest.mark.asyncio
    async def test_requires_an_identifier(self, risk_service):
        outcome = await risk_service.profile()

        assert outcome.error == ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_new_customer(self, risk_service):
        outcome = await risk_service.profile(email="nobody@example.com")

        assert outcome.value.total_orders == 0
        assert outcome.value.risk_tier == RiskTier.NEW

    @pytest.mark.asyncio
    async def test_trusted_by_phone_in_any_form(self, risk_service, orders):
        await seed(orders, [OrderStatus.DELIVERED] * 4 + [OrderStatus.CANCELLED])

        outcome = await risk_service.profile(phone="+8801811111111")

        profile = outcome.value
        assert profile.total_orders == 5
        assert profile.delivered == 4
        assert profile.cancelled == 1
        assert profile.success_rate == Decimal("80.00")
        assert profile.risk_tier == RiskTier.TRUSTED

    @pytest.mark.asyncio
    async def test_low_success_rate_is_blacklisted_tier(self, risk_service, orders):
        await seed(orders, [OrderStatus.DELIVERED, OrderStatus.RETURNED, OrderStatus.CANCELLED])

        profile = (await risk_service.profile(email="KARIM@example.com")).value

        assert profile.risk_tier == RiskTier.BLACKLISTED
        assert profile.is_blacklisted is False
        assert "below 40%" in profile.blacklist_reason

    @pytest.mark.asyncio
    async def test_account_contacts_are_merged(self, risk_service, orders, catalog):
        catalog.add_customer(CustomerAccount(id="u5", email="karim@example.com", phone="01811111111"))
        await seed(orders, [OrderStatus.DELIVERED], email="other@example.com", phone="01900000000", user_id="u5")
        await seed(orders, [OrderStatus.DELIVERED])

        profile = (await risk_service.profile(user_id="u5")).value

        assert profile.total_orders == 2
        assert profile.matched_user_ids == ["u5"]

    @pytest.mark.asyncio
    async def test_flagged_account(self, risk_service, catalog):
        catalog.add_customer(
            CustomerAccount(id="u6", email="karim@example.com", is_blacklisted=True)
        )

        profile = (await risk_service.profile(email="karim@example.com")).value

        assert profile.is_blacklisted
        assert profile.risk_tier == RiskTier.BLACKLISTED
        assert profile.blacklist_reason == "Account is blacklisted"
