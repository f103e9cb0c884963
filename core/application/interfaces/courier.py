"""Courier gateway interface."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.domain.entities import Order
from core.domain.result import Outcome

GENERATED_BY_API = "api"
GENERATED_BY_LOCAL = "local"


@dataclass(frozen=True)
class ConsignmentResult:
    """A consignment created remotely or generated locally."""

    consignment_id: str
    provider: str
    generated_by: str
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    label_url: Optional[str] = None
    status: Optional[str] = None
    warning: Optional[str] = None

    @property
    def synced_from_api(self) -> bool:
        return self.generated_by == GENERATED_BY_API


@dataclass(frozen=True)
class TrackingResult:
    """Parsed tracking response."""

    status: Optional[str] = None
    tracking_url: Optional[str] = None
    events: List[Dict[str, Any]] = field(default_factory=list)


class ICourierGateway(ABC):
    """Shipment consignments against an external courier provider."""

    @abstractmethod
    async def generate_consignment(self, order: Order) -> ConsignmentResult:
        """
        Create a consignment for an order.

        Never fails: any provider problem yields a local consignment with a warning.
        """
        pass

    @abstractmethod
    def build_local_consignment(self, order: Order, warning: Optional[str] = None) -> ConsignmentResult:
        pass

    @abstractmethod
    async def fetch_tracking(self, order: Order) -> Outcome[TrackingResult]:
        """
        Fetch tracking data for the order's consignment.

        Returns:
            Outcome with TrackingResult, or an EXTERNAL / VALIDATION failure
        """
        pass
