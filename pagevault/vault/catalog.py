"""In-process catalog of deployed logic builds.

Maps a deterministic logic address to a stateless build instance.  The proxy
only ever stores the address; resolving it to code happens here on every
call, so swapping the address in storage is the entire upgrade.

Ephemeral -- rebuilt at process start.  Addresses are derived from the build's
qualified name and version, so the same build always lands on the same
address and persisted ``logic_address`` slots stay valid across restarts.
"""

from __future__ import annotations

import hashlib

from loguru import logger

from pagevault.vault.errors import LayoutMismatch
from pagevault.vault.layout import layout_signature
from pagevault.vault.logic import BUILTIN_BUILDS
from pagevault.vault.logic.base import PageLogic


def address_for(build: type) -> str:
    """Deterministic ``0x``-prefixed 40-hex-digit address for a build class."""
    ident = f"{build.__module__}.{build.__qualname__}:{build.version}"
    return "0x" + hashlib.sha256(ident.encode("utf-8")).hexdigest()[:40]


class LogicCatalog:
    """Registry of deployed logic builds keyed by address."""

    def __init__(self) -> None:
        self._builds: dict[str, PageLogic] = {}

    # -- Mutation --------------------------------------------------------------

    def deploy(self, build: type) -> str:
        """Instantiate and register *build*; return its address.

        Raises ``LayoutMismatch`` if the build's declared storage layout does
        not match the vault's field-for-field.  Deploying the same build
        twice is a no-op returning the existing address.
        """
        expected = layout_signature()
        declared = tuple(tuple(entry) for entry in getattr(build, "storage_layout", ()))
        if declared != expected:
            msg = f"Build {build.__qualname__} declares layout {declared!r}, vault layout is {expected!r}"
            raise LayoutMismatch(msg)

        address = address_for(build)
        if address not in self._builds:
            self._builds[address] = build()
            logger.debug("Catalog: deployed {} {} at {}", build.__qualname__, build.version, address)
        return address

    # -- Query -----------------------------------------------------------------

    def resolve(self, address: str) -> PageLogic | None:
        return self._builds.get(address)

    def address_of_version(self, version: str) -> str:
        """Return the address of the deployed build with *version*.

        Raises ``LookupError`` if no deployed build carries that version.
        """
        for address, build in self._builds.items():
            if build.version == version:
                return address
        raise LookupError(version)

    def items(self) -> list[tuple[str, PageLogic]]:
        """Snapshot of ``(address, build)`` pairs in deployment order."""
        return list(self._builds.items())

    def __contains__(self, address: object) -> bool:
        return address in self._builds

    def __len__(self) -> int:
        return len(self._builds)


def default_catalog() -> LogicCatalog:
    """Catalog with every builtin build deployed."""
    catalog = LogicCatalog()
    for build in BUILTIN_BUILDS:
        catalog.deploy(build)
    return catalog
