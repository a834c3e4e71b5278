"""
Test suite for frequency module

Tests the periods-per-year table, periodic rates and normalization of
free-form frequency strings.
"""

import pytest
from decimal import Decimal

from loan_engine.frequency import (
    PaymentFrequency, periods_per_year, periodic_rate, payments_per_month,
    default_number_of_payments, number_of_payments_for_term,
    normalize_frequency, assert_frequency
)


class TestPeriodsPerYear:
    """Test the fixed frequency table"""
    
    @pytest.mark.parametrize("frequency,expected", [
        (PaymentFrequency.WEEKLY, 52),
        (PaymentFrequency.BI_WEEKLY, 26),
        (PaymentFrequency.TWICE_MONTHLY, 24),
        (PaymentFrequency.MONTHLY, 12),
    ])
    def test_periods_per_year(self, frequency, expected):
        """Test every frequency maps to its fixed count"""
        assert periods_per_year(frequency) == expected
    
    def test_periodic_rate(self):
        """Test annual percent is converted to a per-period rate"""
        assert periodic_rate(Decimal('24'), PaymentFrequency.MONTHLY) == Decimal('0.02')
        assert periodic_rate(Decimal('26'), PaymentFrequency.BI_WEEKLY) == Decimal('0.01')
        assert periodic_rate(Decimal('0'), PaymentFrequency.WEEKLY) == Decimal('0')
    
    def test_enum_values_are_wire_strings(self):
        """Test enum values match stored frequency strings"""
        assert PaymentFrequency("bi-weekly") == PaymentFrequency.BI_WEEKLY
        assert PaymentFrequency("twice-monthly") == PaymentFrequency.TWICE_MONTHLY


class TestPaymentCounts:
    """Test payment count helpers"""
    
    def test_default_three_month_term(self):
        """Test the standard term payment counts"""
        assert default_number_of_payments(PaymentFrequency.WEEKLY) == 12
        assert default_number_of_payments(PaymentFrequency.BI_WEEKLY) == 6
        assert default_number_of_payments(PaymentFrequency.TWICE_MONTHLY) == 6
        assert default_number_of_payments(PaymentFrequency.MONTHLY) == 3
    
    def test_payments_per_month(self):
        """Test approximate monthly counts"""
        assert payments_per_month(PaymentFrequency.WEEKLY) == 4
        assert payments_per_month(PaymentFrequency.MONTHLY) == 1
    
    def test_number_of_payments_for_term(self):
        """Test counts derived from a term in months"""
        assert number_of_payments_for_term(PaymentFrequency.MONTHLY, 60) == 60
        assert number_of_payments_for_term(PaymentFrequency.BI_WEEKLY, 24) == 52
        assert number_of_payments_for_term(PaymentFrequency.WEEKLY, 3) == 13


class TestNormalizeFrequency:
    """Test free-form frequency normalization"""
    
    @pytest.mark.parametrize("raw,expected", [
        ("monthly", PaymentFrequency.MONTHLY),
        ("Monthly", PaymentFrequency.MONTHLY),
        ("Bi Weekly", PaymentFrequency.BI_WEEKLY),
        ("biweekly", PaymentFrequency.BI_WEEKLY),
        ("fortnightly", PaymentFrequency.BI_WEEKLY),
        ("semi_monthly", PaymentFrequency.TWICE_MONTHLY),
        ("twice per month", PaymentFrequency.TWICE_MONTHLY),
        ("hebdomadaire", PaymentFrequency.WEEKLY),
        ("1m", PaymentFrequency.MONTHLY),
        ("monthly|15", PaymentFrequency.MONTHLY),
    ])
    def test_string_aliases(self, raw, expected):
        """Test aliases and separators normalize to the enum"""
        assert normalize_frequency(raw) == expected
    
    def test_structured_values(self):
        """Test lists and mappings are searched for a frequency"""
        assert normalize_frequency(["unknown", "weekly"]) == PaymentFrequency.WEEKLY
        assert normalize_frequency({"frequency": "bi-weekly"}) == PaymentFrequency.BI_WEEKLY
        assert normalize_frequency({"raw_frequency": "semimonthly"}) == PaymentFrequency.TWICE_MONTHLY
        assert normalize_frequency(PaymentFrequency.MONTHLY) == PaymentFrequency.MONTHLY
    
    def test_unrecognized_values(self):
        """Test unknown values return None"""
        assert normalize_frequency(None) is None
        assert normalize_frequency("quarterly") is None
        assert normalize_frequency({}) is None
    
    def test_assert_frequency_fallback(self):
        """Test fallback for unrecognized values"""
        assert assert_frequency("garbage") == PaymentFrequency.MONTHLY
        assert assert_frequency("garbage", PaymentFrequency.WEEKLY) == PaymentFrequency.WEEKLY
        assert assert_frequency("weekly") == PaymentFrequency.WEEKLY
