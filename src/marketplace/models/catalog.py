from datetime import datetime, timezone

from sqlalchemy import (
    JSON, BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Table, Text
)
from sqlalchemy.orm import relationship

from marketplace.db import Base, BigIntId


REFUND_POLICIES = ("30-day", "14-day", "7-day", "3-day", "1-day", "no-refunds")


product_tags = Table(
    "product_tags",
    Base.metadata,
    Column("product_id", BigInteger, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", BigInteger, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    """
    A two-level category tree: roots have parent_id NULL, subcategories point
    at their root.

    name is the fallback (English) label. localized_names maps a locale code
    to its label, e.g. {"fr": "Musique"}; the seed script fills it from the
    message catalogs.
    """

    __tablename__ = "categories"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    color = Column(Text, nullable=True)
    parent_id = Column(
        BigInteger, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    localized_names = Column(JSON, nullable=False, default=dict)

    parent = relationship("Category", remote_side=[id], back_populates="subcategories")
    subcategories = relationship("Category", back_populates="parent")

    def __repr__(self) -> str:
        return f"<Category id={self.id} slug={self.slug!r}>"


class Tag(Base):
    __tablename__ = "tags"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Tag id={self.id} name={self.name!r}>"


class Product(Base):
    """
    A digital product sold by one tenant.

    price_cents stores the price as an integer number of cents to avoid
    floating-point rounding errors. $19.99 -> 1999. It is passed to Stripe
    unchanged as unit_amount.
    """

    __tablename__ = "products"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    tenant_id = Column(
        BigInteger, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    category_id = Column(BigInteger, ForeignKey("categories.id"), nullable=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    price_cents = Column(BigInteger, nullable=False)
    image_url = Column(Text, nullable=True)
    refund_policy = Column(Text, nullable=False, default="30-day")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="ck_product_price"),
        CheckConstraint(
            "refund_policy IN ('30-day','14-day','7-day','3-day','1-day','no-refunds')",
            name="ck_product_refund_policy",
        ),
    )

    tenant = relationship("Tenant")
    category = relationship("Category")
    tags = relationship("Tag", secondary=product_tags)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"
