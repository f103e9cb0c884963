"""Marketplace-wide configuration provider interface."""
from abc import ABC, abstractmethod
from dataclasses import dataclass

from core.domain.value_objects import CommissionRule

DEFAULT_COURIER_TIMEOUT_SECONDS = 12.0
MIN_COURIER_TIMEOUT_SECONDS = 1.0


@dataclass(frozen=True)
class CourierConfig:
    """Courier provider connection settings."""

    enabled: bool = False
    provider: str = "custom"
    base_url: str = ""
    consignment_path: str = ""
    tracking_path: str = ""
    api_key: str = ""
    secret_key: str = ""
    bearer_token: str = ""
    timeout_seconds: float = DEFAULT_COURIER_TIMEOUT_SECONDS

    def __post_init__(self):
        try:
            timeout = float(self.timeout_seconds)
        except (TypeError, ValueError):
            timeout = DEFAULT_COURIER_TIMEOUT_SECONDS
        object.__setattr__(self, "timeout_seconds", max(MIN_COURIER_TIMEOUT_SECONDS, timeout))

    @property
    def can_create_consignments(self) -> bool:
        return bool(self.enabled and self.base_url and self.consignment_path)

    @property
    def can_track(self) -> bool:
        return bool(self.enabled and self.base_url and self.tracking_path)


class IMarketplaceConfigProvider(ABC):
    """
    Source of admin-wide settings.

    Implementations are read on every call so that changes take effect
    without a restart; tests substitute deterministic values.
    """

    @abstractmethod
    async def get_global_commission(self) -> CommissionRule:
        """
        Get the marketplace default commission rule.

        Returns:
            A non-inherit rule (percentage/10 when misconfigured)
        """
        pass

    @abstractmethod
    async def get_courier_config(self) -> CourierConfig:
        pass
