"""
Products API — Product Repository
===================================

What:  Translates CRUD intents into parameterized SQL against the pool.
How:   SQLAlchemy statements built from the Product model; every user value
       is a bound parameter, never part of the SQL text.
Who:   Called by the products route handlers with a per-request session.

Result contract:
    list_all()       → List[Product] ordered by id
    get_by_id(id)    → Product | None
    insert(fields)   → Product (with server-assigned id)
    update(id, ...)  → Product | None
    delete_by_id(id) → bool

    "No such row" is a return value, not an exception. Only genuine
    database failures raise, wrapped in DatabaseError.

Existence checks for update and delete use the rows returned by the
mutation itself (UPDATE/DELETE ... RETURNING). There is no separate SELECT
beforehand, so a concurrent delete cannot slip in between check and write.
"""

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from products_api.exceptions import DatabaseError
from products_api.models.product import Product

logger = logging.getLogger(__name__)

DEFAULT_STOCK = 0
UPDATABLE_FIELDS = ("name", "price", "stock")


class ProductRepository:
    """
    Stateless data access for the products table.

    Each method receives the session to use, so one instance can be shared
    by all requests.
    """

    async def list_all(self, db: AsyncSession) -> List[Product]:
        try:
            result = await db.execute(select(Product).order_by(Product.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._wrap(e, "list_all")

    async def get_by_id(self, db: AsyncSession, product_id: int) -> Optional[Product]:
        """
        Fetch one product.

        `product_id` must already be a parsed int; the route rejects
        malformed ids before calling this.
        """
        try:
            result = await db.execute(select(Product).where(Product.id == product_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._wrap(e, "get_by_id", product_id=product_id)

    async def insert(self, db: AsyncSession, fields: Mapping[str, Any]) -> Product:
        """
        Insert a product and return the stored row.

        Args:
            fields: Validated payload; `stock` may be absent or None and then
                    defaults to 0.
        """
        values = {
            "name": fields["name"],
            "price": fields["price"],
            "stock": fields.get("stock") if fields.get("stock") is not None else DEFAULT_STOCK,
        }
        try:
            result = await db.execute(insert(Product).values(**values).returning(Product))
            product = result.scalar_one()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise self._wrap(e, "insert")

        logger.info("Product %d created", product.id)
        return product

    async def update(
        self,
        db: AsyncSession,
        product_id: int,
        fields: Mapping[str, Any],
    ) -> Optional[Product]:
        """
        Apply a partial update and return the merged row.

        Only keys in UPDATABLE_FIELDS are written; everything else on the
        row is preserved. An empty update writes nothing and returns the
        current row (or None when it does not exist).
        """
        values = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not values:
            return await self.get_by_id(db, product_id)

        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(**values)
            .returning(Product)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        try:
            result = await db.execute(stmt)
            product = result.scalar_one_or_none()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise self._wrap(e, "update", product_id=product_id)

        if product is not None:
            logger.info("Product %d updated: %s", product_id, sorted(values))
        return product

    async def delete_by_id(self, db: AsyncSession, product_id: int) -> bool:
        """Delete a product; True when a row was removed."""
        stmt = delete(Product).where(Product.id == product_id).returning(Product.id)
        try:
            result = await db.execute(stmt)
            deleted = result.scalar_one_or_none() is not None
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise self._wrap(e, "delete_by_id", product_id=product_id)

        if deleted:
            logger.info("Product %d deleted", product_id)
        return deleted

    @staticmethod
    def _wrap(error: SQLAlchemyError, operation: str, **context: Any) -> DatabaseError:
        logger.error("Database error in %s: %s", operation, str(error))
        return DatabaseError(
            context={
                "operation": operation,
                "original_error": type(error).__name__,
                **context,
            },
        )


product_repository = ProductRepository()
