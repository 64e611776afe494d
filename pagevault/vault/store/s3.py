"""S3 state store.

One JSON object per vault, under an optional namespace prefix::

    s3://{bucket}/{prefix}/vaults/{vault_id}/state.json

A single PUT replaces the whole object, so a reader sees either the previous
snapshot or the new one.  The committed block number is also written as
object metadata (``x-amz-meta-block-number``) so operators can tell how far a
vault has advanced with a HEAD request.

boto3 is synchronous; every call runs in the thread pool through
``anyio.to_thread.run_sync`` like the local store's file I/O.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

import boto3
from anyio import to_thread
from botocore.config import Config
from botocore.exceptions import ClientError

from pagevault.vault.models.snapshot import VaultSnapshot

if TYPE_CHECKING:
    from pagevault.vault.settings import VaultSettings

_MISSING_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_missing(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _MISSING_CODES


class S3StateStore:
    """S3 implementation of the StateStore protocol."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str,
        access_key: str,
        secret_key: str,
        prefix: str | None = None,
        region: str | None = None,
        path_style: bool = False,
    ) -> None:
        self._bucket = bucket
        self._root = f"{prefix}/vaults" if prefix else "vaults"
        # MinIO and most S3-compatible services need path-style addressing
        # and reject the newer default checksum headers.
        self._client: Any = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=Config(
                request_checksum_calculation="when_required",
                response_checksum_validation="when_required",
                s3={"addressing_style": "path" if path_style else "auto"},
            ),
        )

    @classmethod
    def from_settings(cls, settings: VaultSettings) -> S3StateStore:
        """Build the store from ``PAGEVAULT_S3_*`` settings.

        Raises ``RuntimeError`` if the endpoint, bucket or credentials are missing.
        """
        if not (settings.s3_endpoint and settings.s3_bucket and settings.s3_access_key and settings.s3_secret_key):
            msg = "S3 state store requires PAGEVAULT_S3_ENDPOINT, _BUCKET, _ACCESS_KEY and _SECRET_KEY"
            raise RuntimeError(msg)
        return cls(
            bucket=settings.s3_bucket,
            endpoint_url=settings.s3_endpoint,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key.get_secret_value(),
            prefix=settings.data_prefix,
            region=settings.s3_region,
            path_style=settings.s3_path_style,
        )

    def key_for(self, vault_id: str) -> str:
        return f"{self._root}/{vault_id}/state.json"

    async def _run(self, method: str, **kwargs: Any) -> Any:
        call = getattr(self._client, method)
        return await to_thread.run_sync(partial(call, Bucket=self._bucket, **kwargs))

    # -- StateStore ------------------------------------------------------------

    async def write_snapshot(self, vault_id: str, snapshot: VaultSnapshot) -> None:
        await self._run(
            "put_object",
            Key=self.key_for(vault_id),
            Body=snapshot.model_dump_json(indent=2).encode("utf-8"),
            ContentType="application/json",
            Metadata={"block-number": str(snapshot.block_number)},
        )

    async def read_snapshot(self, vault_id: str) -> VaultSnapshot:
        key = self.key_for(vault_id)
        raw = await to_thread.run_sync(partial(self._fetch, key))
        if raw is None:
            msg = f"Vault snapshot not found: {key}"
            raise FileNotFoundError(msg)
        return VaultSnapshot.model_validate_json(raw)

    def _fetch(self, key: str) -> bytes | None:
        # The streaming body has to be drained on the thread that opened it.
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _is_missing(exc):
                return None
            raise
        return resp["Body"].read()

    async def exists(self, vault_id: str) -> bool:
        try:
            await self._run("head_object", Key=self.key_for(vault_id))
        except ClientError as exc:
            if _is_missing(exc):
                return False
            raise
        return True

    async def delete(self, vault_id: str) -> None:
        # DeleteObject succeeds for missing keys.
        await self._run("delete_object", Key=self.key_for(vault_id))
