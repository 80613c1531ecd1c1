"""
Products API — Products Route Handlers
========================================

What:  CRUD endpoints for the products resource.
How:   Each handler parses the path id, validates the body (mutations only),
       calls the repository and maps its typed result to a status code.
Who:   Any HTTP client of the service.

Routes:
    GET    /products        → 200 list
    GET    /products/{id}   → 200 | 400 invalid id | 404
    POST   /products        → 201 | 400 violations | 500
    PUT    /products/{id}   → 200 | 400 invalid id / violations | 404
    DELETE /products/{id}   → 204 | 400 invalid id | 404

Ordering inside a handler is fixed: id check, then body validation, then
the database. A malformed id or payload never reaches a query.
"""

import logging
import re
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from products_api.database import get_db_session
from products_api.exceptions import (
    InvalidProductIdError,
    ProductNotFoundError,
    ValidationError,
)
from products_api.schemas.product import (
    ErrorResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from products_api.services.product_repository import product_repository
from products_api.services.validation import validate_product

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

# products.id is a PostgreSQL INTEGER
_ID_PATTERN = re.compile(r"-?[0-9]+")
_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1


def parse_product_id(raw_id: str) -> int:
    """
    Turn the `{product_id}` path segment into an int.

    Accepts an optional minus sign followed by ASCII digits, within the
    signed 32-bit range of the id column. Anything else ("abc", "1.5",
    " 7", "99999999999") raises InvalidProductIdError.
    """
    if not _ID_PATTERN.fullmatch(raw_id):
        raise InvalidProductIdError(raw_id)
    product_id = int(raw_id)
    if not _INT32_MIN <= product_id <= _INT32_MAX:
        raise InvalidProductIdError(raw_id)
    return product_id


def _ensure_valid(payload: dict, partial: bool) -> None:
    violations = validate_product(payload, partial=partial)
    if violations:
        raise ValidationError([v.model_dump() for v in violations])


@router.get(
    "",
    response_model=List[ProductResponse],
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="List all products",
)
async def list_products(db: AsyncSession = Depends(get_db_session)) -> List[ProductResponse]:
    products = await product_repository.list_all(db)
    return [ProductResponse.model_validate(p) for p in products]


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        400: {"description": "Invalid product ID", "model": ErrorResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
    },
    summary="Get a single product",
)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    """
    Return one product.

    `product_id` is declared as str so that a non-numeric segment reaches
    parse_product_id() and yields our 400 body instead of FastAPI's 422.
    """
    pid = parse_product_id(product_id)
    product = await product_repository.get_by_id(db, pid)
    if product is None:
        raise ProductNotFoundError(pid)
    return ProductResponse.model_validate(product)


@router.post(
    "",
    status_code=201,
    response_model=ProductResponse,
    responses={
        400: {"description": "Validation failed", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Create a product",
)
async def create_product(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    """
    Create a product from `{name, price, stock?}`.

    `stock` defaults to 0 when omitted. Returns the stored row, including
    the id assigned by the database.
    """
    fields = payload.model_dump(exclude_unset=True)
    _ensure_valid(fields, partial=False)

    product = await product_repository.insert(db, fields)
    return ProductResponse.model_validate(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        400: {"description": "Invalid product ID or validation failed", "model": ErrorResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
    },
    summary="Partially update a product",
)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    """Update any subset of `{name, price, stock}`; other fields are kept."""
    pid = parse_product_id(product_id)
    fields = payload.model_dump(exclude_unset=True)
    _ensure_valid(fields, partial=True)

    product = await product_repository.update(db, pid, fields)
    if product is None:
        raise ProductNotFoundError(pid)
    return ProductResponse.model_validate(product)


@router.delete(
    "/{product_id}",
    status_code=204,
    response_class=Response,
    responses={
        400: {"description": "Invalid product ID", "model": ErrorResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
    },
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    pid = parse_product_id(product_id)
    if not await product_repository.delete_by_id(db, pid):
        raise ProductNotFoundError(pid)
    return Response(status_code=204)
