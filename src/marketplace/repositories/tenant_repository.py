from typing import Optional, List, Dict, Any
from sqlalchemy import select, update
from marketplace.repositories.base import BaseRepository
from marketplace.models import Tenant
from marketplace.core.exceptions import NotFoundError
import logging

logger = logging.getLogger(__name__)

tenants = Tenant.__table__


class TenantRepository(BaseRepository[Dict[str, Any]]):
    """Repository for seller tenants and their Stripe onboarding state"""

    @property
    def table(self):
        return tenants

    def get_by_id(self, tenant_id: int) -> Dict[str, Any]:
        row = self.get_row(tenant_id)
        if not row:
            raise NotFoundError("Tenant", str(tenant_id))
        return row

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(select(tenants).where(tenants.c.slug == slug))

    def get_by_slug(self, slug: str) -> Dict[str, Any]:
        row = self.find_by_slug(slug)
        if not row:
            raise NotFoundError("Tenant", slug)
        return row

    def list_all(self) -> List[Dict[str, Any]]:
        return self.execute_query(select(tenants).order_by(tenants.c.id))

    def create(
        self,
        name: str,
        slug: str,
        stripe_account_id: str,
        image_url: Optional[str] = None,
        stripe_details_submitted: bool = False,
    ) -> Dict[str, Any]:
        tenant_id = self.insert_returning_id({
            "name": name,
            "slug": slug,
            "stripe_account_id": stripe_account_id,
            "image_url": image_url,
            "stripe_details_submitted": stripe_details_submitted,
        })
        logger.info(f"Created tenant {tenant_id} ({slug}) on account {stripe_account_id}")
        return self.get_by_id(tenant_id)

    def set_details_submitted(self, stripe_account_id: str, submitted: bool) -> int:
        """
        Update the onboarding flag of the tenant owning a connected account.

        Returns the number of tenants touched; stripe_account_id is unique so
        this is 0 or 1.
        """
        statement = (
            update(tenants)
            .where(tenants.c.stripe_account_id == stripe_account_id)
            .values(stripe_details_submitted=submitted)
        )
        affected = self.execute_command(statement)
        logger.info(
            f"Set stripe_details_submitted={submitted} for account {stripe_account_id} "
            f"({affected} tenant(s) updated)"
        )
        return affected
