import logging
from contextlib import contextmanager

from sqlalchemy import BigInteger, Integer, create_engine, text
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from marketplace.core.config import DatabaseConfig

logger = logging.getLogger(__name__)

Base = declarative_base()

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntId = BigInteger().with_variant(Integer, "sqlite")


class Database:
    """
    Owns the SQLAlchemy engine for one application instance.

    In-memory SQLite gets a StaticPool so every connection sees the same
    database; everything else uses the regular QueuePool settings.
    """

    def __init__(self, config: DatabaseConfig):
        self.url = config.url

        if self.url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite:///"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs = {
                "pool_size": config.pool_size,
                "max_overflow": config.max_overflow,
                "pool_timeout": config.pool_timeout,
                "pool_recycle": config.pool_recycle,
                "pool_pre_ping": True,
            }

        self.engine = create_engine(self.url, echo=config.echo, **kwargs)

    @contextmanager
    def get_connection(self):
        """Plain connection; callers commit explicitly."""
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def transaction(self):
        """Connection inside BEGIN; commits on success, rolls back on error."""
        with self.engine.begin() as conn:
            yield conn

    def create_all(self) -> None:
        # Importing the models registers every table on Base.metadata
        import marketplace.models  # noqa: F401

        Base.metadata.create_all(self.engine)
        logger.info("Database schema ensured")

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()
