"""Domain exceptions for the page vault.

Every rejection is raised before anything is committed, so a caller that
catches one of these can assume persistent state is exactly as it was.

The engine never raises HTTP exceptions -- translating these into status
codes is the router's responsibility.  Each class also derives from the
closest builtin so generic ``except LookupError`` style handlers keep
working.
"""

from __future__ import annotations


class PageStoreError(Exception):
    """Base class for all vault rejections."""

    code = "error"

    @property
    def payload(self) -> str:
        """The rejection reason as relayed to callers."""
        return str(self.args[0]) if self.args else self.code


class Unauthorized(PageStoreError, PermissionError):
    """Caller is not the privileged writer on a mutating call."""

    code = "unauthorized"


class InvalidArgument(PageStoreError, ValueError):
    """Empty id/content, zero or no-op target, malformed batch, empty term."""

    code = "invalid_argument"


class LayoutMismatch(InvalidArgument):
    """A logic build declares a storage layout that differs from the vault's."""

    code = "layout_mismatch"


class NotFound(PageStoreError, LookupError):
    """Delete on an id that does not currently exist."""

    code = "not_found"


class OutOfRange(PageStoreError, IndexError):
    """Pagination offset or registry index past the end of the registry."""

    code = "out_of_range"


class ReadOnlyViolation(PageStoreError, RuntimeError):
    """A view call attempted to write a storage slot."""

    code = "read_only_violation"


class DelegatedFailure(PageStoreError, RuntimeError):
    """The forwarded call failed for a reason the logic did not classify.

    ``payload`` carries the inner failure's message unchanged and the inner
    exception is chained as ``__cause__``.
    """

    code = "delegated_failure"

    def __init__(self, operation: str, payload: str) -> None:
        super().__init__(payload)
        self.operation = operation
