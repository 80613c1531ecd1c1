"""
Products API — Product SQLAlchemy Model
=========================================

What:  ORM model for the `products` table.
Who:   Used by the product repository to build parameterized statements and
       by create_tables() at startup.

Table Design:
    - id:    INTEGER autoincrement primary key, assigned by the database
    - name:  VARCHAR(255), NOT NULL
    - price: NUMERIC(10, 2), NOT NULL, read back as float so it serializes
             as a JSON number
    - stock: INTEGER, NOT NULL, DEFAULT 0

    The CHECK constraints repeat the service's field rules at the storage
    level; requests are validated before they ever reach them.
"""

from sqlalchemy import CheckConstraint, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from products_api.database import Base

NAME_MAX_LENGTH = 255

# INTEGER column
STOCK_MAX = 2 ** 31 - 1

# NUMERIC(PRICE_PRECISION, PRICE_SCALE): prices must stay below PRICE_LIMIT
PRICE_PRECISION = 10
PRICE_SCALE = 2
PRICE_LIMIT = 10 ** (PRICE_PRECISION - PRICE_SCALE)


class Product(Base):
    """
    A product row.

    Lifecycle:
        1. Inserted by POST /products (id assigned by the database)
        2. Partially updated in place by PUT /products/{id}
        3. Hard-deleted by DELETE /products/{id}; its id then resolves to nothing
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
    )

    price: Mapped[float] = mapped_column(
        Numeric(PRICE_PRECISION, PRICE_SCALE, asdecimal=False),
        nullable=False,
    )

    stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_products_name_not_empty"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.price}, stock={self.stock})>"
