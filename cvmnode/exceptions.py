"""Exception hierarchy for cvmnode.

All cvmnode-specific exceptions inherit from CVMNodeError, enabling
callers to catch every resolver failure with a single except clause
while still branching on the conditions the orchestrator cares about
(InstanceNotFoundError vs OperationNotImplementedError).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cvmnode.types import InstanceFilter


class CVMNodeError(Exception):
    """Base exception for all cvmnode errors."""


class ConfigurationError(CVMNodeError):
    """Raised for invalid configuration or missing required settings."""


class MetadataUnavailableError(CVMNodeError):
    """Raised when a local instance metadata read fails."""

    def __init__(self, path: str, reason: str = "unknown") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Metadata read of '{path}' failed: {reason}")


class DirectoryQueryError(CVMNodeError):
    """Raised when the DescribeInstances call itself fails.

    Covers transport, authentication and throttling failures as well as
    error payloads returned by the API. Never raised for an empty match.
    """

    def __init__(self, code: str, message: str, request_id: str = "") -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        suffix = f" (request {request_id})" if request_id else ""
        super().__init__(f"DescribeInstances failed: {code}: {message}{suffix}")


class InstanceNotFoundError(CVMNodeError):
    """Raised when the directory answered but no instance matched."""

    def __init__(self, filter: InstanceFilter) -> None:  # noqa: A002
        self.filter = filter
        super().__init__(f"No instance matches {filter.name}={filter.value}")


class OperationNotImplementedError(CVMNodeError):
    """Raised by operations this provider permanently does not support."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} is not implemented by this provider")
