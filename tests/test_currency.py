"""
Test suite for currency module

Tests Decimal conversion and half-up rounding of monetary values.
"""

import pytest
from decimal import Decimal

from loan_engine.currency import (
    Currency, to_decimal, round_currency, format_currency
)


class TestToDecimal:
    """Test conversion of caller-supplied numbers"""
    
    def test_converts_numeric_types(self):
        """Test ints, floats, strings and Decimals convert exactly"""
        assert to_decimal(500) == Decimal('500')
        assert to_decimal(500.61) == Decimal('500.61')  # Through str, no binary noise
        assert to_decimal('29') == Decimal('29')
        assert to_decimal(Decimal('0.01')) == Decimal('0.01')
    
    def test_rejects_non_finite_and_non_numeric(self):
        """Test NaN, infinities, booleans and garbage are not computable"""
        assert to_decimal(float('nan')) is None
        assert to_decimal(float('inf')) is None
        assert to_decimal(float('-inf')) is None
        assert to_decimal('Infinity') is None
        assert to_decimal('abc') is None
        assert to_decimal(None) is None
        assert to_decimal(True) is None
        assert to_decimal([1]) is None


class TestRounding:
    """Test currency rounding"""
    
    def test_half_up_rounding(self):
        """Test half-up rounding to cents"""
        assert round_currency(Decimal('100.555')) == Decimal('100.56')
        assert round_currency(Decimal('100.554')) == Decimal('100.55')
        assert round_currency(Decimal('166.665')) == Decimal('166.67')
        assert round_currency(Decimal('-0.005')) == Decimal('-0.01')
    
    def test_rounds_floats_through_string(self):
        """Test floats are rounded from their decimal representation"""
        assert round_currency(2.675) == Decimal('2.68')


class TestFormatting:
    """Test display formatting"""
    
    def test_format_currency(self):
        """Test display formatting uses the currency precision"""
        assert format_currency(Decimal('1250.5'), Currency.CAD) == "CAD 1,250.50"
        assert format_currency(Decimal('175'), Currency.USD) == "USD 175.00"
