"""Multi-tenant marketplace storefront service."""

__version__ = "0.1.0"
