"""
Products API — Application Package
====================================

What: A small HTTP service exposing CRUD over a `products` table plus a
      database-backed health check.
Who:  Imported by uvicorn (`products_api.main:app`), the test suite and the
      `products-api` console script.

Layering:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← id parsing, status codes
    ├─────────────────────────────────────┤
    │   Services (Validation, Repository) │  ← field rules, parameterized SQL
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async engine and pool
    └─────────────────────────────────────┘

    Each layer only calls the one directly below it.
"""

__version__ = "1.0.0"
