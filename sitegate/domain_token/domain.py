"""
Domain Utility Functions
========================
Parent-domain extraction and the allow-list check that decides whether the
guard is installed at all.
"""

from typing import Iterable, Optional

DEFAULT_HOST = "localhost"


def _strip_port(host: str) -> str:
    if host.startswith("["):
        # IPv6 literal, e.g. "[::1]:8000"
        return host.split("]", 1)[0] + "]"
    return host.split(":", 1)[0]


def _normalize_host(host: Optional[str]) -> str:
    host = _strip_port((host or "").strip()).lower()
    # Fully qualified form, e.g. "shop.example.com."
    if host.endswith("."):
        host = host[:-1]
    return host


def get_parent_domain(host: Optional[str]) -> str:
    """
    Get the parent domain (last two dot-separated labels) of a host.

    Args:
        host: Host header value, optionally with a port

    Returns:
        Parent domain (e.g., "www.example.com" -> "example.com")
    """
    host = _normalize_host(host) or DEFAULT_HOST
    labels = host.split(".")
    return ".".join(labels[-2:])


def should_guard(host: Optional[str], temp_domains: Iterable[str]) -> bool:
    """Check if the site answering for ``host`` must be token protected."""
    return get_parent_domain(host) in set(temp_domains)


def is_subdomain(domain: str) -> bool:
    """Check if a deployment domain has more than two labels."""
    return len(_normalize_host(domain).split(".")) > 2
