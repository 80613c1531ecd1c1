"""
Products API — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract.
How:   FastAPI parses request bodies into these models (type checking only)
       and serializes responses through them. Field rules such as
       "price must be non-negative" live in services/validation.py, which
       runs on the parsed payload before anything is trusted.

Numbers are strict: JSON booleans and numeric strings are type errors rather
than being coerced to 1/0 or parsed.

Request fields are all Optional on purpose: a missing `name` on create must
surface as a field violation with a 400, not as FastAPI's automatic 422.
`model_fields_set` tells the validator which fields the client actually sent.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what clients send
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    """Body of POST /products. `name` and `price` are required by the validator."""

    name: Optional[str] = Field(default=None, description="Product name (1-255 chars)")
    price: Optional[Union[StrictInt, StrictFloat]] = Field(default=None, description="Unit price, >= 0")
    stock: Optional[StrictInt] = Field(default=None, description="Units in stock, >= 0 (default 0)")

    model_config = {"extra": "ignore"}


class ProductUpdate(BaseModel):
    """Body of PUT /products/{id}. Any subset of fields; absent fields are kept."""

    name: Optional[str] = Field(default=None, description="New product name (1-255 chars)")
    price: Optional[Union[StrictInt, StrictFloat]] = Field(default=None, description="New unit price, >= 0")
    stock: Optional[StrictInt] = Field(default=None, description="New stock level, >= 0")

    model_config = {"extra": "ignore"}


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """A product as returned by every products endpoint."""

    id: int = Field(description="Server-assigned product identifier")
    name: str = Field(description="Product name")
    price: float = Field(description="Unit price")
    stock: int = Field(description="Units in stock")

    model_config = {"from_attributes": True}


class Violation(BaseModel):
    """One reason a payload failed validation."""

    field: str = Field(description="Offending field name")
    message: str = Field(description="Human-readable reason")


class ErrorResponse(BaseModel):
    """
    Error body for 400/404/500 responses.

    `details` is only present for validation failures:
        {"error": "Validation failed", "details": [{"field": "name", ...}]}
    Every other error is a bare {"error": "..."}.
    """

    error: str = Field(description="Error description")
    details: Optional[List[Violation]] = Field(default=None, description="Field violations")


class HealthResponse(BaseModel):
    """Body of GET /health: {"status": "ok"|"error", "database": "connected"|"disconnected"}."""

    status: str = Field(description="ok or error")
    database: str = Field(description="connected or disconnected")
