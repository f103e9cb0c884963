"""Tests for the marketplace config providers."""

from decimal import Decimal

import pytest

from core.domain.enums import CommissionType
from core.domain.value_objects import CommissionRule
from core.infrastructure.config_provider import SettingsConfigProvider, StaticConfigProvider
from core.settings import AppSettings
from core.settings.modules import (
    CommissionSettings,
    CourierSettings,
    DatabaseSettings,
    NotificationSettings,
    RenewalSettings,
)


def make_settings(commission=None, courier=None) -> AppSettings:
    return AppSettings(
        commission=commission or CommissionSettings(),
        courier=courier or CourierSettings(),
        renewal=RenewalSettings(),
        database=DatabaseSettings(),
        notifications=NotificationSettings(),
    )


@pytest.mark.asyncio
async def test_global_commission_from_settings():
    settings = make_settings(
        commission=CommissionSettings(
            default_type="hybrid", default_value=Decimal("5"), default_fixed=Decimal("20")
        )
    )

    rule = await SettingsConfigProvider(lambda: settings).get_global_commission()

    assert rule.type == CommissionType.HYBRID
    assert rule.value == Decimal("5")
    assert rule.fixed_amount == Decimal("20")


@pytest.mark.asyncio
async def test_inherit_global_falls_back_to_default():
    settings = make_settings(commission=CommissionSettings(default_type="inherit"))

    rule = await SettingsConfigProvider(lambda: settings).get_global_commission()

    assert rule.type == CommissionType.PERCENTAGE
    assert rule.value == Decimal("10")


@pytest.mark.asyncio
async def test_static_provider_guards_inherit():
    provider = StaticConfigProvider(global_commission=CommissionRule(type="inherit"))

    rule = await provider.get_global_commission()

    assert rule.type == CommissionType.PERCENTAGE


@pytest.mark.asyncio
async def test_courier_config_from_settings():
    settings = make_settings(
        courier=CourierSettings(
            enabled=True,
            base_url="https://courier.test",
            consignment_path="/create",
            timeout_seconds=0.2,
        )
    )

    config = await SettingsConfigProvider(lambda: settings).get_courier_config()

    assert config.can_create_consignments
    assert not config.can_track
    assert config.timeout_seconds == 1.0
