"""
Products API — Product Payload Validation
===========================================

What:  Pure functions checking a candidate product payload against the
       field rules. No I/O, no exceptions: the result is a list of
       violations, empty when the payload is valid.
Who:   Called by the POST and PUT route handlers before the repository.

Rules (checked only for fields present in the payload):
    name   non-empty, at most 255 characters
    price  finite, >= 0, below 100000000, at most 2 decimal places
    stock  >= 0, at most 2147483647
    create mode additionally requires `name` and `price`.

An explicit null counts as "absent" for required fields in create mode and
for `stock` on create (which then defaults to 0). Anywhere else a null would
mean "set this NOT NULL column to NULL" and is reported as a violation.
"""

import math
from decimal import Decimal
from typing import Any, List, Mapping

from products_api.models.product import (
    NAME_MAX_LENGTH,
    PRICE_LIMIT,
    PRICE_SCALE,
    STOCK_MAX,
)
from products_api.schemas.product import Violation

REQUIRED_ON_CREATE = ("name", "price")


def validate_product(payload: Mapping[str, Any], partial: bool = False) -> List[Violation]:
    """
    Validate a product payload.

    Args:
        payload: Fields the client actually sent (e.g. model_dump(exclude_unset=True))
        partial: True for PUT (partial update), False for POST (create)

    Returns:
        Violations in field order (name, price, stock); empty list means valid.
    """
    violations: List[Violation] = []

    if not partial:
        for field in REQUIRED_ON_CREATE:
            if payload.get(field) is None:
                violations.append(Violation(field=field, message=f"{field} is required"))

    for field in ("name", "price", "stock"):
        if field not in payload:
            continue
        value = payload[field]
        if value is None:
            if partial:
                violations.append(Violation(field=field, message=f"{field} must not be null"))
            continue
        violations.extend(_CHECKS[field](value))

    return sorted(violations, key=lambda v: _FIELD_ORDER[v.field])


def _check_name(name: str) -> List[Violation]:
    if name == "":
        return [Violation(field="name", message="name must not be empty")]
    if len(name) > NAME_MAX_LENGTH:
        return [Violation(
            field="name",
            message=f"name must be at most {NAME_MAX_LENGTH} characters",
        )]
    return []


def _check_price(price: float) -> List[Violation]:
    # ints are exact and may exceed float range, so isfinite only applies to floats
    if isinstance(price, float) and not math.isfinite(price):
        return [Violation(field="price", message="price must be a finite number")]
    if price < 0:
        return [Violation(field="price", message="price must be non-negative")]
    if price >= PRICE_LIMIT:
        return [Violation(field="price", message=f"price must be less than {PRICE_LIMIT}")]
    if Decimal(str(price)).as_tuple().exponent < -PRICE_SCALE:
        return [Violation(
            field="price",
            message=f"price must have at most {PRICE_SCALE} decimal places",
        )]
    return []


def _check_stock(stock: int) -> List[Violation]:
    if stock < 0:
        return [Violation(field="stock", message="stock must be non-negative")]
    if stock > STOCK_MAX:
        return [Violation(field="stock", message=f"stock must be at most {STOCK_MAX}")]
    return []


_CHECKS = {
    "name": _check_name,
    "price": _check_price,
    "stock": _check_stock,
}

_FIELD_ORDER = {"name": 0, "price": 1, "stock": 2}
