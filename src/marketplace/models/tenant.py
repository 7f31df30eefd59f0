from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Text

from marketplace.db import Base, BigIntId


class Tenant(Base):
    """
    A seller storefront inside the marketplace.

    Every tenant owns exactly one Stripe connected account. The
    stripe_details_submitted flag mirrors Stripe's `details_submitted` and is
    flipped by the `account.updated` webhook; checkout refuses to sell for a
    tenant until it is true.
    """

    __tablename__ = "tenants"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    image_url = Column(Text, nullable=True)
    stripe_account_id = Column(Text, nullable=False, unique=True)
    stripe_details_submitted = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Tenant id={self.id} slug={self.slug!r}>"
