import pytest

from marketplace.core.config import AppConfig, Config, DatabaseConfig, TenantRoutingConfig
from marketplace.utils import FormattingUtils, format_currency, generate_tenant_url


@pytest.mark.parametrize("value, expected", [
    (1234.56, "$1,235"),
    ("9999", "$9,999"),
    (0, "$0"),
    (0.5, "$1"),
    ("1000000", "$1,000,000"),
    (-5, "-$5"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_currency_rejects_non_numbers():
    with pytest.raises(ValueError):
        format_currency("abc")


def test_cents_conversions():
    assert FormattingUtils.units_to_cents("19.99") == 1999
    assert FormattingUtils.format_cents(123456) == "$1,235"


def make_config(environment, subdomains):
    return Config(
        database=DatabaseConfig(url="sqlite://"),
        tenants=TenantRoutingConfig(
            app_url="https://market.example.com/",
            root_domain="market.example.com",
            enable_subdomain_routing=subdomains,
        ),
        app=AppConfig(environment=environment),
    )


def test_tenant_url_uses_path_in_development():
    assert generate_tenant_url("acme", make_config("development", True)) == \
        "https://market.example.com/tenants/acme"


def test_tenant_url_uses_path_without_subdomain_routing():
    assert generate_tenant_url("acme", make_config("production", False)) == \
        "https://market.example.com/tenants/acme"


def test_tenant_url_uses_subdomain_when_enabled():
    assert generate_tenant_url("acme", make_config("production", True)) == "https://acme.market.example.com"
