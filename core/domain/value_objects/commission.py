"""Commission value objects."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from ..enums import CommissionSource, CommissionType
from .money import ZERO, round_money, to_decimal


@dataclass(frozen=True)
class CommissionRule:
    """
    A commission rule declared at one tier (product, category, vendor or global).

    ``value`` is in percentage points; ``fixed_amount`` is an absolute amount.
    Both are never negative. A rule of type INHERIT has no effect of its own.
    """

    type: CommissionType = CommissionType.INHERIT
    value: Decimal = ZERO
    fixed_amount: Decimal = ZERO

    def __post_init__(self):
        if not isinstance(self.type, CommissionType):
            object.__setattr__(self, "type", CommissionType(self.type))
        object.__setattr__(self, "value", max(to_decimal(self.value), ZERO))
        object.__setattr__(self, "fixed_amount", max(to_decimal(self.fixed_amount), ZERO))

    @property
    def is_inherit(self) -> bool:
        return self.type == CommissionType.INHERIT

    @classmethod
    def normalize(
        cls,
        raw_type: Any = None,
        value: Any = None,
        fixed_amount: Any = None,
        fallback_type: CommissionType = CommissionType.INHERIT,
    ) -> "CommissionRule":
        """
        Build a rule from loosely typed input.

        Unknown or missing types become ``fallback_type``; invalid or negative
        amounts become zero.
        """
        normalized = str(raw_type or "").strip().lower()
        try:
            rule_type = CommissionType(normalized)
        except ValueError:
            rule_type = fallback_type
        return cls(type=rule_type, value=to_decimal(value), fixed_amount=to_decimal(fixed_amount))

    @classmethod
    def inherit(cls) -> "CommissionRule":
        return cls()


DEFAULT_GLOBAL_COMMISSION = CommissionRule(
    type=CommissionType.PERCENTAGE, value=Decimal("10")
)


@dataclass(frozen=True)
class CommissionSnapshot:
    """
    Commission computed once for a line item at order time.

    Never recomputed: later rule changes do not affect existing orders.
    """

    amount: Decimal
    source: CommissionSource
    type: Optional[CommissionType]
    value: Decimal
    fixed_amount: Decimal
    item_total: Decimal
    net_amount: Decimal

    @classmethod
    def none(cls, item_total: Any) -> "CommissionSnapshot":
        total = round_money(item_total)
        return cls(
            amount=ZERO,
            source=CommissionSource.NONE,
            type=None,
            value=ZERO,
            fixed_amount=ZERO,
            item_total=total,
            net_amount=total,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": str(self.amount),
            "source": self.source.value,
            "type": self.type.value if self.type else None,
            "value": str(self.value),
            "fixed_amount": str(self.fixed_amount),
            "item_total": str(self.item_total),
            "net_amount": str(self.net_amount),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommissionSnapshot":
        raw_type = data.get("type")
        return cls(
            amount=round_money(data.get("amount")),
            source=CommissionSource(data.get("source") or CommissionSource.NONE.value),
            type=CommissionType(raw_type) if raw_type else None,
            value=to_decimal(data.get("value")),
            fixed_amount=to_decimal(data.get("fixed_amount")),
            item_total=round_money(data.get("item_total")),
            net_amount=round_money(data.get("net_amount")),
        )
