"""Tests for phone normalization and risk tiers."""

from decimal import Decimal

import pytest

from core.domain.enums import OrderStatus, RiskTier
from core.domain.services import classify_risk, map_courier_status, success_rate
from core.domain.value_objects import normalize_phone, phone_variants


class TestPhone:
    @pytest.mark.parametrize(
        "raw", ["01712345678", "+8801712345678", "8801712345678", "1712345678", "017-1234 5678"]
    )
    def test_written_forms_normalize_to_local(self, raw):
        assert normalize_phone(raw) == "01712345678"

    def test_variants_cover_every_form(self):
        variants = phone_variants("+8801712345678")

        assert "01712345678" in variants
        assert "+8801712345678" in variants
        assert "8801712345678" in variants
        assert "1712345678" in variants
        assert len(variants) == len(set(variants))

    def test_blank_phone(self):
        assert normalize_phone("  ") == ""
        assert phone_variants("") == []


class TestRisk:
    def test_success_rate_rounds(self):
        assert success_rate(2, 3) == Decimal("66.67")
        assert success_rate(0, 0) == Decimal("0.00")

    @pytest.mark.parametrize(
        "total,rate,expected",
        [
            (0, Decimal("0"), RiskTier.NEW),
            (5, Decimal("80"), RiskTier.TRUSTED),
            (5, Decimal("60"), RiskTier.MEDIUM),
            (5, Decimal("40"), RiskTier.HIGH),
            (5, Decimal("39.99"), RiskTier.BLACKLISTED),
        ],
    )
    def test_tiers(self, total, rate, expected):
        assert classify_risk(total, rate, flagged=False) == expected

    def test_flag_overrides_history(self):
        assert classify_risk(10, Decimal("100"), flagged=True) == RiskTier.BLACKLISTED


class TestCourierStatusMap:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("in_transit", OrderStatus.SHIPPED),
            ("In Transit", OrderStatus.SHIPPED),
            ("Out-for-Delivery", OrderStatus.SHIPPED),
            ("delivered", OrderStatus.DELIVERED),
            ("failed", OrderStatus.CANCELLED),
            ("returned", OrderStatus.RETURNED),
        ],
    )
    def test_known_statuses(self, raw, expected):
        assert map_courier_status(raw) == expected

    def test_unknown_status_has_no_mapping(self):
        assert map_courier_status("lost_in_space") is None
        assert map_courier_status(None) is None
