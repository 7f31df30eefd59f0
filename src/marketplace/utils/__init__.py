from marketplace.utils.formatting import FormattingUtils, format_currency
from marketplace.utils.tenants import generate_tenant_url

__all__ = ["FormattingUtils", "format_currency", "generate_tenant_url"]
