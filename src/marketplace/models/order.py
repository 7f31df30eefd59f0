from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from marketplace.db import Base, BigIntId


class Order(Base):
    """
    One purchased product, written by the Stripe webhook.

    A checkout session with several line items produces several orders that
    share stripe_checkout_session_id. stripe_account_id is the connected
    account the session ran on (NULL for platform-level sessions).

    name is snapshotted from the Stripe product so later renames do not alter
    the purchase history.
    """

    __tablename__ = "orders"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey("users.id"), nullable=False)
    product_id = Column(BigInteger, ForeignKey("products.id"), nullable=False)
    name = Column(Text, nullable=False)
    stripe_checkout_session_id = Column(Text, nullable=False, index=True)
    stripe_account_id = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user = relationship("User")
    product = relationship("Product")

    def __repr__(self) -> str:
        return (
            f"<Order id={self.id} user_id={self.user_id} "
            f"product_id={self.product_id}>"
        )
