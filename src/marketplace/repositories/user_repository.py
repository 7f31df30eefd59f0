from typing import Optional, List, Dict, Any, Iterable
from sqlalchemy import select
from werkzeug.security import generate_password_hash
from marketplace.repositories.base import BaseRepository
from marketplace.models import User, user_tenants
from marketplace.core.exceptions import NotFoundError
import logging

logger = logging.getLogger(__name__)

users = User.__table__


class UserRepository(BaseRepository[Dict[str, Any]]):
    """Repository for marketplace accounts"""

    @property
    def table(self):
        return users

    def get_by_id(self, user_id: int) -> Dict[str, Any]:
        row = self.get_row(user_id)
        if not row:
            raise NotFoundError("User", str(user_id))
        return row

    def find_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        return self.get_row(user_id)

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(select(users).where(users.c.email == email))

    def list_all(self) -> List[Dict[str, Any]]:
        rows = self.execute_query(select(users).order_by(users.c.id))
        # Never hand password hashes to callers
        for row in rows:
            row.pop("hashed_password", None)
        return rows

    def list_tenant_ids(self, user_id: int) -> List[int]:
        rows = self.execute_query(
            select(user_tenants.c.tenant_id).where(user_tenants.c.user_id == user_id)
        )
        return [int(r["tenant_id"]) for r in rows]

    def create(
        self,
        email: str,
        username: str,
        password: Optional[str] = None,
        roles: Optional[List[str]] = None,
        tenant_ids: Iterable[int] = (),
    ) -> Dict[str, Any]:
        """Create a user and link it to tenants in one transaction."""
        values = {
            "email": email,
            "username": username,
            "hashed_password": generate_password_hash(password) if password else None,
            "roles": roles or ["user"],
        }

        with self.transaction() as conn:
            user_id = self.insert_returning_id(values, conn=conn)
            for tenant_id in tenant_ids:
                conn.execute(user_tenants.insert().values(user_id=user_id, tenant_id=tenant_id))

        logger.info(f"Created user {user_id} ({email}) with roles {values['roles']}")
        return self.get_by_id(user_id)

    @staticmethod
    def has_role(user: Dict[str, Any], role: str) -> bool:
        return role in (user.get("roles") or [])
