from marketplace.core.config import Config


def generate_tenant_url(tenant_slug: str, config: Config) -> str:
    """
    Public storefront URL of a tenant.

    Development and deployments without subdomain routing use the path form
    <app_url>/tenants/<slug>; otherwise each tenant lives on its own
    subdomain of the root domain.
    """
    routing = config.tenants

    if config.is_development or not routing.enable_subdomain_routing:
        return f"{routing.app_url.rstrip('/')}/tenants/{tenant_slug}"

    return f"https://{tenant_slug}.{routing.root_domain}"
