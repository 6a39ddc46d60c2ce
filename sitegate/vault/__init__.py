"""Sitegate Vault integration module."""

from .client import (
    SitegateVault,
    get_vault,
    load_api_key,
)

__all__ = [
    "SitegateVault",
    "get_vault",
    "load_api_key",
]
