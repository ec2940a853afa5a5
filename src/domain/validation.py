"""
Input validation rules for provisioning requests.

Each check returns an error message, or None when the value is valid.
"""

import re
from typing import Optional

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")
SUBDOMAIN_MIN_LENGTH = 3
SUBDOMAIN_MAX_LENGTH = 30

HOSTNAME_PATTERN = re.compile(
    r"^(?=.{4,253}$)([a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$"
)
COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")

RESERVED_SUBDOMAINS = frozenset({"www", "api", "admin", "app", "mail", "static"})


def check_subdomain(subdomain: str) -> Optional[str]:
    if not SUBDOMAIN_MIN_LENGTH <= len(subdomain) <= SUBDOMAIN_MAX_LENGTH:
        return (
            f"Subdomain must be {SUBDOMAIN_MIN_LENGTH}-{SUBDOMAIN_MAX_LENGTH} characters"
        )
    if not SUBDOMAIN_PATTERN.match(subdomain):
        return (
            "Invalid subdomain format. Use only lowercase letters, numbers, "
            "and hyphens, starting and ending with a letter or number"
        )
    if subdomain in RESERVED_SUBDOMAINS:
        return f"Subdomain '{subdomain}' is reserved"
    return None


def check_custom_domain(domain: str, platform_domain: Optional[str] = None) -> Optional[str]:
    if not HOSTNAME_PATTERN.match(domain):
        return f"Invalid custom domain '{domain}'"
    if platform_domain and is_platform_host(domain, platform_domain):
        return f"Custom domain '{domain}' cannot be under the platform domain"
    return None


def is_platform_host(domain: str, platform_domain: str) -> bool:
    domain = domain.rstrip(".").lower()
    platform_domain = platform_domain.rstrip(".").lower()
    return domain == platform_domain or domain.endswith(f".{platform_domain}")


def check_primary_color(color: str) -> Optional[str]:
    if not COLOR_PATTERN.match(color):
        return "Primary color must be a hex color like #3B82F6"
    return None


def validate_tenant_config(config, platform_domain: Optional[str] = None) -> Optional[str]:
    """First problem found in a TenantConfig, or None"""
    if not config.blog_name or not config.blog_name.strip():
        return "Blog name is required"
    error = check_subdomain(config.subdomain)
    if error:
        return error
    if config.custom_domain:
        error = check_custom_domain(config.custom_domain, platform_domain)
        if error:
            return error
    return check_primary_color(config.primary_color)
