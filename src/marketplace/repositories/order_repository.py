from typing import List, Dict, Any
from sqlalchemy import select
from marketplace.repositories.base import BaseRepository
from marketplace.models import Order
from marketplace.core.exceptions import NotFoundError
import logging

logger = logging.getLogger(__name__)

orders = Order.__table__


class OrderRepository(BaseRepository[Dict[str, Any]]):
    """Repository for purchase records written from Stripe checkouts"""

    @property
    def table(self):
        return orders

    def get_by_id(self, order_id: int) -> Dict[str, Any]:
        row = self.get_row(order_id)
        if not row:
            raise NotFoundError("Order", str(order_id))
        return row

    def create_many(self, order_values: List[Dict[str, Any]]) -> List[int]:
        """
        Insert several orders atomically.

        Either every order of the batch is written or none is.
        """
        if not order_values:
            return []

        with self.transaction() as conn:
            order_ids = [self.insert_returning_id(values, conn=conn) for values in order_values]

        logger.info(f"Created {len(order_ids)} order(s): {order_ids}")
        return order_ids

    def list_by_checkout_session(self, session_id: str) -> List[Dict[str, Any]]:
        return self.execute_query(
            select(orders)
            .where(orders.c.stripe_checkout_session_id == session_id)
            .order_by(orders.c.id)
        )

    def list_all(self) -> List[Dict[str, Any]]:
        return self.execute_query(select(orders).order_by(orders.c.id))
