"""
Marketplace configuration providers.

``SettingsConfigProvider`` reads pydantic settings on every call;
``StaticConfigProvider`` serves fixed values (tests, demos).
"""
import logging
from typing import Callable, Optional

from core.application.interfaces import CourierConfig, IMarketplaceConfigProvider
from core.domain.enums import CommissionType
from core.domain.value_objects import DEFAULT_GLOBAL_COMMISSION, CommissionRule
from core.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


def global_rule_or_default(rule: CommissionRule) -> CommissionRule:
    """The global tier can never inherit: fall back to percentage/10."""
    if rule.type == CommissionType.INHERIT:
        logger.warning("⚠️ Global commission is misconfigured, using percentage/10")
        return DEFAULT_GLOBAL_COMMISSION
    return rule


class SettingsConfigProvider(IMarketplaceConfigProvider):
    """Config provider backed by ``AppSettings``."""

    def __init__(self, settings_factory: Callable[[], AppSettings] = get_app_settings):
        self._settings_factory = settings_factory

    async def get_global_commission(self) -> CommissionRule:
        section = self._settings_factory().commission
        rule = CommissionRule.normalize(
            section.default_type, section.default_value, section.default_fixed
        )
        return global_rule_or_default(rule)

    async def get_courier_config(self) -> CourierConfig:
        section = self._settings_factory().courier
        return CourierConfig(
            enabled=section.enabled,
            provider=section.provider,
            base_url=section.base_url,
            consignment_path=section.consignment_path,
            tracking_path=section.tracking_path,
            api_key=section.api_key,
            secret_key=section.secret_key,
            bearer_token=section.bearer_token,
            timeout_seconds=section.timeout_seconds,
        )


class StaticConfigProvider(IMarketplaceConfigProvider):
    """Config provider with fixed values."""

    def __init__(
        self,
        global_commission: Optional[CommissionRule] = None,
        courier: Optional[CourierConfig] = None,
    ):
        self.global_commission = global_commission or DEFAULT_GLOBAL_COMMISSION
        self.courier = courier or CourierConfig()

    async def get_global_commission(self) -> CommissionRule:
        return global_rule_or_default(self.global_commission)

    async def get_courier_config(self) -> CourierConfig:
        return self.courier
