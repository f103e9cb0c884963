"""
Phone number normalization.

Customers write the same local number in several ways (01712345678,
+8801712345678, 8801712345678, 1712345678). Lookups match on every variant.
"""
import re
from typing import List

_NON_DIAL_CHARS = re.compile(r"[^\d+]")


def normalize_phone(phone: str) -> str:
    """
    Reduce a phone number to its local ``0``-prefixed form.

    Args:
        phone: Raw phone number as typed by the customer

    Returns:
        Local form (e.g. ``01712345678``) or empty string
    """
    compact = _NON_DIAL_CHARS.sub("", (phone or "").strip())
    if not compact:
        return ""
    if compact.startswith("+88"):
        compact = compact[3:]
    elif compact.startswith("880"):
        compact = compact[2:]
    compact = compact.lstrip("+")
    if compact and not compact.startswith("0"):
        compact = f"0{compact}"
    return compact


def phone_variants(phone: str) -> List[str]:
    """Return every equivalent written form of ``phone``, de-duplicated, in stable order."""
    raw = (phone or "").strip()
    local = normalize_phone(raw)
    if not local:
        return []

    candidates = [
        raw,
        _NON_DIAL_CHARS.sub("", raw),
        local,
        f"+88{local}",
        f"88{local}",
        local[1:],
    ]

    variants: List[str] = []
    for candidate in candidates:
        if candidate and candidate not in variants:
            variants.append(candidate)
    return variants
