"""Order number value object."""
import random
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..clock import utc_now

_ORDER_NUMBER = re.compile(r"^[A-Z]{3}-\d+-\d+$")

CHECKOUT_PREFIX = "ORD"
RENEWAL_PREFIX = "REN"
SUBSCRIPTION_PREFIX = "SUB"


def generate_reference(prefix: str, max_suffix: int = 9999, now: Optional[datetime] = None) -> str:
    """Build ``PREFIX-<epoch millis>-<random 0..max_suffix>``."""
    moment = now or utc_now()
    millis = int(moment.timestamp() * 1000)
    return f"{prefix}-{millis}-{random.randint(0, max_suffix)}"


@dataclass(frozen=True)
class OrderNumber:
    """
    Human-readable unique order identifier.

    Format: PREFIX-<epoch millis>-<random suffix>
    Examples:
    - ORD-1718000000000-4821 (checkout, suffix 0..9999)
    - REN-1718000000000-77120 (subscription renewal, suffix 0..99999)
    """

    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Order number cannot be empty")
        if not _ORDER_NUMBER.match(self.value):
            raise ValueError(f"Invalid order number format: {self.value}")

    @classmethod
    def generate(
        cls,
        prefix: str = CHECKOUT_PREFIX,
        now: Optional[datetime] = None,
        max_suffix: int = 9999,
    ) -> "OrderNumber":
        return cls(value=generate_reference(prefix, max_suffix=max_suffix, now=now))

    @property
    def prefix(self) -> str:
        return self.value.split("-", 1)[0]

    def __str__(self) -> str:
        return self.value
