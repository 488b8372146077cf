"""
podinbox Errors

Every failure surfaced by the inbox layer is one of these kinds. Each carries a
human-readable message and, where the transport produced one, a status code,
so callers can render a meaningful message without touching httpx.
"""

from typing import Any


class PodInboxError(Exception):
    """Base error for inbox operations."""

    kind: str = "error"

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        """Structured form of the error."""
        return {"kind": self.kind, "message": self.message, "code": self.code}

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (status {self.code})"
        return self.message


class NetworkFailure(PodInboxError):
    """Transport-level failure, including timeouts and unexpected statuses."""

    kind = "network_failure"


class NotFound(PodInboxError):
    """The resource does not exist."""

    kind = "not_found"


class Forbidden(PodInboxError):
    """Access to the resource was denied."""

    kind = "forbidden"


class MalformedGraph(PodInboxError):
    """A document could not be read as valid triples."""

    kind = "malformed_graph"


class SchemaMismatch(PodInboxError):
    """A notification does not satisfy the configured shape."""

    kind = "schema_mismatch"


class InvalidAgent(PodInboxError):
    """An agent identifier is not an absolute http(s) IRI."""

    kind = "invalid_agent"


class NoInboxDeclared(PodInboxError):
    """The document parsed but does not reference an inbox."""

    kind = "no_inbox_declared"


class PartialInboxCreation(PodInboxError):
    """The container was created but its access-control resource was not.

    The container is left unprotected. Calling create_inbox again re-applies
    the access-control resource.
    """

    kind = "partial_inbox_creation"


class NotReady(PodInboxError):
    """A command was issued before an owner was bound to the session."""

    kind = "not_ready"
