import pytest

from src.domain.entities import TenantConfig
from src.domain.validation import (
    check_custom_domain,
    check_primary_color,
    check_subdomain,
    validate_tenant_config,
)


@pytest.mark.parametrize("subdomain", ["acme", "my-blog", "a1b", "x" * 30])
def test_valid_subdomains(subdomain):
    assert check_subdomain(subdomain) is None


@pytest.mark.parametrize(
    "subdomain", ["ab", "x" * 31, "-acme", "acme-", "Acme", "ac.me", "ac_me", "www", "api"]
)
def test_invalid_subdomains(subdomain):
    assert check_subdomain(subdomain) is not None


@pytest.mark.parametrize("domain", ["blog.acme.com", "news.acme.co.uk", "acme.io"])
def test_valid_custom_domains(domain):
    assert check_custom_domain(domain) is None


@pytest.mark.parametrize("domain", ["localhost", "acme", "-acme.com", "acme..com", "acme.c"])
def test_invalid_custom_domains(domain):
    assert check_custom_domain(domain) is not None


def test_primary_color():
    assert check_primary_color("#3b82f6") is None
    assert check_primary_color("3B82F6") is not None
    assert check_primary_color("#FFF") is not None


def test_validate_tenant_config_reports_first_problem():
    config = TenantConfig(blog_name=" ", subdomain="-", owner_email="a@acme.com")
    assert validate_tenant_config(config) == "Blog name is required"

    config = TenantConfig(
        blog_name="Acme", subdomain="acme", owner_email="a@acme.com", custom_domain="nope"
    )
    assert validate_tenant_config(config) == "Invalid custom domain 'nope'"

    config = TenantConfig(blog_name="Acme", subdomain="acme", owner_email="a@acme.com")
    assert validate_tenant_config(config) is None


@pytest.mark.parametrize(
    "domain", ["blogs.example.com", "acme.blogs.example.com", "www.acme.blogs.example.com"]
)
def test_custom_domain_under_platform_domain_is_rejected(domain):
    assert check_custom_domain(domain, "blogs.example.com") == (
        f"Custom domain '{domain}' cannot be under the platform domain"
    )


def test_custom_domain_sharing_a_suffix_with_platform_domain_is_allowed():
    assert check_custom_domain("myblogs.example.com", "blogs.example.com") is None


def test_validate_tenant_config_checks_platform_domain():
    config = TenantConfig(
        blog_name="Evil",
        subdomain="evil",
        owner_email="e@evil.com",
        custom_domain="acme.blogs.example.com",
    )

    assert validate_tenant_config(config) is None
    assert "platform domain" in validate_tenant_config(config, "blogs.example.com")
