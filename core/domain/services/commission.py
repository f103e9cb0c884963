"""
Commission rules.

Precedence: product -> category -> vendor -> global. A rule of type
``inherit`` defers to the next tier. The resulting commission is clamped to
``[0, item_total]`` so a vendor is never charged more than the sale itself.
"""
from decimal import Decimal
from typing import Optional, Tuple

from ..enums import CommissionSource, CommissionType
from ..value_objects import (
    DEFAULT_GLOBAL_COMMISSION,
    CommissionRule,
    CommissionSnapshot,
    ZERO,
    round_money,
)


def pick_commission_source(
    product_rule: Optional[CommissionRule],
    category_rule: Optional[CommissionRule],
    vendor_rule: Optional[CommissionRule],
    global_rule: Optional[CommissionRule],
) -> Tuple[CommissionSource, Optional[CommissionRule]]:
    """
    Pick the first non-inherit rule in tier order.

    Args:
        product_rule: Rule declared on the product
        category_rule: Rule declared on the product's category (None if no category)
        vendor_rule: Rule declared on the vendor (None if no vendor)
        global_rule: Marketplace-wide default (None means percentage/10)

    Returns:
        (source tier, rule) - rule is None when source is NONE
    """
    tiers = (
        (CommissionSource.PRODUCT, product_rule),
        (CommissionSource.CATEGORY, category_rule),
        (CommissionSource.VENDOR, vendor_rule),
    )
    for source, rule in tiers:
        if rule is not None and not rule.is_inherit:
            return source, rule

    effective_global = global_rule if global_rule is not None else DEFAULT_GLOBAL_COMMISSION
    if effective_global.is_inherit:
        return CommissionSource.NONE, None
    return CommissionSource.GLOBAL, effective_global


def calculate_commission_amount(item_total: Decimal, rule: CommissionRule) -> Tuple[Decimal, Decimal]:
    """
    Evaluate a rule against a line total.

    percentage: item_total * value / 100
    fixed: fixed_amount, or value when fixed_amount is zero
    hybrid: fixed_amount + item_total * value / 100

    Returns:
        (commission, net) with ``0 <= commission <= item_total`` and
        ``net == item_total - commission``
    """
    total = max(round_money(item_total), ZERO)
    percentage_part = total * rule.value / Decimal("100")

    if rule.type == CommissionType.PERCENTAGE:
        raw = percentage_part
    elif rule.type == CommissionType.FIXED:
        raw = rule.fixed_amount if rule.fixed_amount > ZERO else rule.value
    elif rule.type == CommissionType.HYBRID:
        raw = rule.fixed_amount + percentage_part
    else:
        raw = ZERO

    commission = min(max(round_money(raw), ZERO), total)
    return commission, total - commission


def build_commission_snapshot(
    item_total: Decimal,
    source: CommissionSource,
    rule: Optional[CommissionRule],
) -> CommissionSnapshot:
    """Freeze the commission for a line so it is never recomputed later."""
    if rule is None or source == CommissionSource.NONE:
        return CommissionSnapshot.none(item_total)

    commission, net = calculate_commission_amount(item_total, rule)
    return CommissionSnapshot(
        amount=commission,
        source=source,
        type=rule.type,
        value=rule.value,
        fixed_amount=rule.fixed_amount,
        item_total=round_money(item_total),
        net_amount=net,
    )
