"""
Products API — Payload Validation Unit Tests
==============================================

What:  Tests for validate_product() in create and partial-update modes.
How:   Pure function calls; no database, no HTTP.

What we test:
    ✅ Valid create and update payloads produce no violations
    ✅ Required fields on create (name, price)
    ✅ Name length bounds (0 and 256 rejected, 1 and 255 accepted)
    ✅ Negative / non-finite price, negative stock
    ✅ Column limits: stock INTEGER range, price NUMERIC(10, 2) range and scale
    ✅ Explicit nulls
"""

import math

import pytest

from products_api.services.validation import validate_product


def fields_of(violations):
    return [v.field for v in violations]


class TestCreateMode:
    """validate_product(payload, partial=False)"""

    def test_valid_payload(self):
        assert validate_product({"name": "Test Product", "price": 99.99, "stock": 10}) == []

    def test_stock_is_optional(self):
        assert validate_product({"name": "Test Product", "price": 99.99}) == []

    def test_stock_null_is_treated_as_absent(self):
        assert validate_product({"name": "Test Product", "price": 1, "stock": None}) == []

    def test_missing_name(self):
        violations = validate_product({"price": 10})
        assert fields_of(violations) == ["name"]
        assert violations[0].message == "name is required"

    def test_missing_price(self):
        violations = validate_product({"name": "No Price"})
        assert fields_of(violations) == ["price"]
        assert violations[0].message == "price is required"

    def test_empty_payload_reports_both_required_fields(self):
        assert fields_of(validate_product({})) == ["name", "price"]

    def test_empty_name(self):
        violations = validate_product({"name": "", "price": 10})
        assert fields_of(violations) == ["name"]
        assert violations[0].message == "name must not be empty"

    def test_null_name_is_required_violation(self):
        violations = validate_product({"name": None, "price": 10})
        assert [v.message for v in violations] == ["name is required"]

    def test_price_zero_allowed(self):
        assert validate_product({"name": "Freebie", "price": 0}) == []

    def test_multiple_violations_in_field_order(self):
        violations = validate_product({"stock": -1, "name": "", "price": -5})
        assert fields_of(violations) == ["name", "price", "stock"]


class TestNameLength:

    @pytest.mark.parametrize("length", [1, 255])
    def test_boundaries_accepted(self, length):
        assert validate_product({"name": "A" * length, "price": 1}) == []

    def test_256_rejected(self):
        violations = validate_product({"name": "A" * 256, "price": 10})
        assert fields_of(violations) == ["name"]
        assert "255" in violations[0].message

    def test_length_checked_in_partial_mode(self):
        assert fields_of(validate_product({"name": "A" * 256}, partial=True)) == ["name"]


class TestNumbers:

    def test_negative_price(self):
        violations = validate_product({"name": "Test", "price": -5})
        assert [v.message for v in violations] == ["price must be non-negative"]

    def test_negative_stock(self):
        violations = validate_product({"name": "Test", "price": 10, "stock": -1})
        assert [v.message for v in violations] == ["stock must be non-negative"]

    @pytest.mark.parametrize("price", [math.inf, -math.inf, math.nan])
    def test_non_finite_price(self, price):
        violations = validate_product({"name": "Test", "price": price})
        assert [v.message for v in violations] == ["price must be a finite number"]

    def test_stock_at_integer_max_accepted(self):
        assert validate_product({"name": "Test", "price": 1, "stock": 2147483647}) == []

    @pytest.mark.parametrize("stock", [2 ** 31, 2 ** 64])
    def test_stock_above_integer_max(self, stock):
        violations = validate_product({"name": "Test", "price": 1, "stock": stock})
        assert [v.message for v in violations] == ["stock must be at most 2147483647"]

    def test_largest_storable_price_accepted(self):
        assert validate_product({"name": "Test", "price": 99999999.99}) == []

    @pytest.mark.parametrize("price", [100000000, 1e8, 2 ** 64, 10 ** 400])
    def test_price_at_or_above_limit(self, price):
        violations = validate_product({"name": "Test", "price": price})
        assert [v.message for v in violations] == ["price must be less than 100000000"]

    @pytest.mark.parametrize("price", [1.239, 0.001, 1e-05])
    def test_price_with_more_than_two_decimals(self, price):
        violations = validate_product({"name": "Test", "price": price})
        assert [v.message for v in violations] == ["price must have at most 2 decimal places"]

    @pytest.mark.parametrize("price", [1.2, 1.23, 5.0, 7])
    def test_price_with_two_decimals_or_fewer(self, price):
        assert validate_product({"name": "Test", "price": price}) == []


class TestPartialMode:
    """validate_product(payload, partial=True)"""

    def test_empty_payload_is_valid(self):
        assert validate_product({}, partial=True) == []

    def test_single_field(self):
        assert validate_product({"stock": 15}, partial=True) == []

    def test_name_and_price_not_required(self):
        assert validate_product({"price": 79.99, "stock": 30}, partial=True) == []

    def test_negative_values(self):
        violations = validate_product({"price": -1, "stock": -1}, partial=True)
        assert fields_of(violations) == ["price", "stock"]

    def test_limits_checked_in_partial_mode(self):
        violations = validate_product({"price": 1e8, "stock": 2 ** 31}, partial=True)
        assert fields_of(violations) == ["price", "stock"]

    @pytest.mark.parametrize("field", ["name", "price", "stock"])
    def test_explicit_null_rejected(self, field):
        violations = validate_product({field: None}, partial=True)
        assert [v.message for v in violations] == [f"{field} must not be null"]
