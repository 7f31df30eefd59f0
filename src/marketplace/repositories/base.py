from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List, Any, Dict, Union
from contextlib import contextmanager
from sqlalchemy import Table, func, select, text
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.sql import Executable
from marketplace.core.exceptions import DatabaseError
from marketplace.db import Database
import logging

T = TypeVar('T')

Statement = Union[str, Executable]

logger = logging.getLogger(__name__)


def _compile(statement: Statement) -> Executable:
    return text(statement) if isinstance(statement, str) else statement


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Statements may be raw SQL strings or SQLAlchemy Core expressions built on
    the model tables; rows always come back as plain dictionaries.
    """

    def __init__(self, database: Database):
        self.database = database

    @contextmanager
    def get_db_connection(self):
        """Database connection context manager with error handling"""
        try:
            with self.database.get_connection() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error(f"Database connection error: {str(e)}")
            raise DatabaseError(f"Database connection failed: {str(e)}")

    @contextmanager
    def transaction(self):
        """
        Run several writes atomically.

        Yields a connection inside BEGIN; the block commits when it exits
        cleanly and rolls back on any exception.
        """
        try:
            with self.database.transaction() as conn:
                yield conn
        except IntegrityError as e:
            logger.error(f"Integrity constraint violation in transaction: {str(e)}")
            raise DatabaseError(f"Data integrity violation: {str(e)}", "TRANSACTION")
        except SQLAlchemyError as e:
            logger.error(f"Transaction failed: {str(e)}")
            raise DatabaseError("Transaction failed", "TRANSACTION")

    def execute_query(
        self,
        query: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Execute SELECT query and return results as list of dictionaries

        Raises:
            DatabaseError: When query execution fails
        """
        try:
            with self.get_db_connection() as conn:
                result = conn.execute(_compile(query), params or {})
                return [dict(row._mapping) for row in result]
        except SQLAlchemyError as e:
            logger.error(f"Query execution failed: {query}, Error: {str(e)}")
            raise DatabaseError("Query execution failed", "SELECT")

    def execute_single_query(
        self,
        query: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Execute query expecting single result

        Returns:
            Single row dictionary or None if not found
        """
        try:
            with self.get_db_connection() as conn:
                result = conn.execute(_compile(query), params or {}).first()
                return dict(result._mapping) if result else None
        except SQLAlchemyError as e:
            logger.error(f"Single query execution failed: {query}, Error: {str(e)}")
            raise DatabaseError("Single query execution failed", "SELECT")

    def execute_command(
        self,
        command: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> int:
        """
        Execute INSERT/UPDATE/DELETE command

        Returns:
            Number of affected rows
        """
        try:
            with self.get_db_connection() as conn:
                result = conn.execute(_compile(command), params or {})
                conn.commit()
                return result.rowcount
        except IntegrityError as e:
            logger.error(f"Integrity constraint violation: {command}, Error: {str(e)}")
            raise DatabaseError(f"Data integrity violation: {str(e)}", "WRITE")
        except SQLAlchemyError as e:
            logger.error(f"Command execution failed: {command}, Error: {str(e)}")
            raise DatabaseError("Command execution failed", "WRITE")

    def execute_scalar(
        self,
        query: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Execute query returning single scalar value (COUNT, SUM, etc.)
        """
        try:
            with self.get_db_connection() as conn:
                return conn.execute(_compile(query), params or {}).scalar()
        except SQLAlchemyError as e:
            logger.error(f"Scalar query execution failed: {query}, Error: {str(e)}")
            raise DatabaseError("Scalar query execution failed", "SELECT")

    def insert_returning_id(self, values: Dict[str, Any], conn=None) -> int:
        """
        Insert one row into this repository's table and return its primary key.

        Pass `conn` to take part in an open transaction().
        """
        statement = self.table.insert().values(**values)
        if conn is not None:
            return conn.execute(statement).inserted_primary_key[0]

        try:
            with self.get_db_connection() as own_conn:
                result = own_conn.execute(statement)
                own_conn.commit()
                return result.inserted_primary_key[0]
        except IntegrityError as e:
            logger.error(f"Insert with integrity violation on {self.table_name}, Error: {str(e)}")
            raise DatabaseError(f"Data integrity violation: {str(e)}", "INSERT")
        except SQLAlchemyError as e:
            logger.error(f"Insert execution failed on {self.table_name}, Error: {str(e)}")
            raise DatabaseError("Insert execution failed", "INSERT")

    def get_row(self, entity_id: int) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            select(self.table).where(self.table.c.id == entity_id)
        )

    def count(self) -> int:
        return int(self.execute_scalar(select(func.count()).select_from(self.table)) or 0)

    @property
    def table_name(self) -> str:
        """Table name for the entity"""
        return self.table.name

    # Abstract members that concrete repositories must implement
    @property
    @abstractmethod
    def table(self) -> Table:
        """Model table backing this repository"""
        pass

    @abstractmethod
    def get_by_id(self, entity_id: int) -> T:
        """Get entity by ID"""
        pass
