"""Address-layer endpoints: identity, deployed builds, upgrade and transfer."""

from __future__ import annotations

from fastapi import APIRouter, status

from pagevault.vault.deps import Caller, Proxy
from pagevault.vault.models.api import BuildResponse, IdentityResponse, TransferRequest, UpgradeRequest
from pagevault.vault.routers._http import vault_errors

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/identity", response_model=IdentityResponse)
async def get_identity(proxy: Proxy, caller: Caller) -> IdentityResponse:
    """Current writer and logic target, plus what the live build reports about itself."""
    with vault_errors():
        version = await proxy.call(caller, "get_version")
        features = await proxy.call(caller, "get_features")
    return IdentityResponse(
        vault_id=proxy.vault_id,
        privileged_writer=proxy.privileged_writer(),
        logic_address=proxy.logic_address(),
        version=version,
        features=features,
        block_number=proxy.block_number,
    )


@router.get("/builds", response_model=list[BuildResponse])
async def list_builds(proxy: Proxy) -> list[BuildResponse]:
    """Logic builds deployed in this process, in deployment order."""
    active = proxy.logic_address()
    return [
        BuildResponse(address=address, version=build.version, features=list(build.features), active=address == active)
        for address, build in proxy.catalog.items()
    ]


@router.post("/upgrade", status_code=status.HTTP_204_NO_CONTENT)
async def upgrade_logic(body: UpgradeRequest, proxy: Proxy, caller: Caller) -> None:
    with vault_errors():
        await proxy.call(caller, "upgrade_logic", body.new_target)


@router.post("/transfer", status_code=status.HTTP_204_NO_CONTENT)
async def transfer_writer(body: TransferRequest, proxy: Proxy, caller: Caller) -> None:
    with vault_errors():
        await proxy.call(caller, "transfer_writer", body.new_writer)
