"""Replaceable logic builds executed by the proxy."""

from pagevault.vault.logic.base import ZERO_ADDRESS, PageLogic, is_zero_account, mutating, view
from pagevault.vault.logic.v1 import PageRegistryV1
from pagevault.vault.logic.v2 import PageRegistryV2

BUILTIN_BUILDS: tuple[type, ...] = (PageRegistryV1, PageRegistryV2)

__all__ = [
    "BUILTIN_BUILDS",
    "ZERO_ADDRESS",
    "PageLogic",
    "PageRegistryV1",
    "PageRegistryV2",
    "is_zero_account",
    "mutating",
    "view",
]
