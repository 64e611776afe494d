"""Translation of vault rejections into HTTP errors."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from pagevault.vault.errors import (
    DelegatedFailure,
    InvalidArgument,
    NotFound,
    OutOfRange,
    PageStoreError,
    ReadOnlyViolation,
    Unauthorized,
)

_STATUS_BY_ERROR: tuple[tuple[type[PageStoreError], int], ...] = (
    (Unauthorized, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (OutOfRange, 416),
    (InvalidArgument, 422),
    (DelegatedFailure, status.HTTP_502_BAD_GATEWAY),
    (ReadOnlyViolation, status.HTTP_502_BAD_GATEWAY),
)


def status_for(exc: PageStoreError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@contextmanager
def vault_errors() -> Iterator[None]:
    """Re-raise any ``PageStoreError`` as an ``HTTPException`` with its reason."""
    try:
        yield
    except PageStoreError as exc:
        raise HTTPException(status_for(exc), detail=exc.payload) from None
