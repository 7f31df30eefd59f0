from datetime import datetime, timezone

from sqlalchemy import JSON, BigInteger, Column, DateTime, ForeignKey, Table, Text
from sqlalchemy.orm import relationship

from marketplace.db import Base, BigIntId


user_tenants = Table(
    "user_tenants",
    Base.metadata,
    Column("user_id", BigInteger, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("tenant_id", BigInteger, ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """
    A marketplace account.

    roles is a JSON list rather than a separate table; the only values in use
    are "super-admin" and "user". A user may belong to several tenants
    through user_tenants.
    """

    __tablename__ = "users"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    username = Column(Text, nullable=False, unique=True)
    hashed_password = Column(Text, nullable=True)
    roles = Column(JSON, nullable=False, default=lambda: ["user"])
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    tenants = relationship("Tenant", secondary=user_tenants)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
