"""
Products API — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the failure cases a request can hit.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       JSON error responses with the matching HTTP status code.
Who:   Raised by routes and the product repository; caught by global handlers.

Exception Hierarchy:
    ProductsApiError (base)
    ├── ValidationError          → 400 Bad Request (payload violates field rules)
    ├── InvalidProductIdError    → 400 Bad Request (path id is not an integer)
    ├── ProductNotFoundError     → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error

Client input errors are raised before any query is issued. The repository
never raises for a missing row; it returns None/False and the route raises
ProductNotFoundError.
"""

from typing import Any, Dict, List, Optional

# Body of every 500 response; internals stay in the server log
INTERNAL_ERROR_BODY = {"error": "Internal server error"}


class ProductsApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Client-facing error description (safe to return)
        context:  Additional debug info (logged, never returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ProductsApiError):
    """
    Raised when a product payload fails validation.

    HTTP: 400 Bad Request

    Example response:
        {
            "error": "Validation failed",
            "details": [{"field": "price", "message": "price must be non-negative"}]
        }
    """

    def __init__(
        self,
        violations: List[Dict[str, str]],
        message: str = "Validation failed",
    ):
        super().__init__(message=message, context={"violations": violations})
        self.violations = violations


class InvalidProductIdError(ProductsApiError):
    """
    Raised when the `{id}` path segment is not a usable integer.

    HTTP: 400 Bad Request

    Distinct from ProductNotFoundError: "abc" is malformed input, while
    "999" is a well-formed id that may simply have no row.
    """

    def __init__(self, raw_id: str):
        super().__init__(message="Invalid product ID", context={"raw_id": raw_id})
        self.raw_id = raw_id


class ProductNotFoundError(ProductsApiError):
    """
    Raised when a well-formed product id resolves to no row.

    HTTP: 404 Not Found
    """

    def __init__(self, product_id: int):
        super().__init__(message="Product not found", context={"product_id": product_id})
        self.product_id = product_id


class DatabaseError(ProductsApiError):
    """
    Raised when a database operation fails for reasons unrelated to input.

    What:    Connection refused, pool exhausted, query failure, constraint
             violation the validator could not foresee.
    HTTP:    500 Internal Server Error

    Security Note:
        The client only ever sees a generic message. The original error type
        and operation are kept in `context` and logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
