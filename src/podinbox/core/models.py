"""
podinbox Core Data Models

These models define the data structures used throughout podinbox:
- Access control: authorization entries written to an inbox ACL
- Notifications: messages deposited into an inbox
- Shapes: predicates a notification must carry
- Config: connection settings for the pod client
"""

from datetime import datetime, UTC
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from podinbox.core.constants import HTTP_TIMEOUT_SECS_DEFAULT, HTTP_USER_AGENT_DEFAULT


# =============================================================================
# Enums
# =============================================================================


class AccessMode(str, Enum):
    """Access modes of the ACL vocabulary."""

    READ = "Read"
    WRITE = "Write"
    APPEND = "Append"
    CONTROL = "Control"


class SubjectTag(str, Enum):
    """Fragment naming an authorization block inside an ACL document."""

    OWNER = "owner"
    PUBLIC = "public"


class DocumentKind(str, Enum):
    """Document kinds the graph codec knows how to write."""

    ACL = "acl"
    NOTIFICATION = "notification"


# =============================================================================
# Access Control Models
# =============================================================================


class AccessControlEntry(BaseModel):
    """One authorization block of an ACL document."""

    model_config = ConfigDict(frozen=True)

    subject_tag: SubjectTag
    agent: str | None = None  # Set for a specific agent
    agent_class: str | None = None  # Set for a class of agents (e.g. foaf:Agent)
    access_to: str
    default: str | None = None  # Container whose members inherit this entry
    modes: frozenset[AccessMode]


class InboxContainer(BaseModel):
    """A container acting as a mailbox."""

    location: str
    owner: str


# =============================================================================
# Notification Models
# =============================================================================


class CustomTriple(BaseModel):
    """Caller-supplied triple embedded in a notification document."""

    predicate: str  # Full IRI
    value: str
    subject: str | None = None  # Defaults to the notification location


class NotificationOptions(BaseModel):
    """Optional parts of a new notification."""

    custom: list[CustomTriple] = Field(default_factory=list)
    published: datetime | None = None  # Defaults to now


class NotificationResource(BaseModel):
    """A single notification document inside an inbox."""

    id: str
    location: str
    title: str
    content: str = ""
    published: datetime = Field(default_factory=lambda: datetime.now(UTC))
    read: bool = False
    inbox_name: str = ""
    custom: list[CustomTriple] = Field(default_factory=list)

    @field_validator("published")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        # Naive timestamps are taken as UTC so sorting never mixes the two
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Ack(BaseModel):
    """Uniform success envelope."""

    code: int = 200
    message: str


# =============================================================================
# Shape Models
# =============================================================================


class ShapeField(BaseModel):
    """A predicate described by a notification shape."""

    predicate: str  # Full IRI
    label: str | None = None
    required: bool = True


class NotificationShape(BaseModel):
    """Predicates a notification must carry."""

    name: str = "notification"
    fields: list[ShapeField] = Field(default_factory=list)

    @property
    def required_predicates(self) -> list[str]:
        return [f.predicate for f in self.fields if f.required]


# =============================================================================
# Config Models
# =============================================================================


class PodConfig(BaseModel):
    """Configuration for the pod HTTP client."""

    auth_token: str = ""  # Sent as a Bearer token when set
    http_timeout_secs: float = HTTP_TIMEOUT_SECS_DEFAULT
    verify_tls: bool = True
    user_agent: str = HTTP_USER_AGENT_DEFAULT


class PodInboxConfig(BaseModel):
    """Main podinbox configuration."""

    pod: PodConfig = Field(default_factory=PodConfig)
    owner_webid: str = ""
    default_inbox: str = ""
    notification_shape: str = ""  # Path or URL of a shape file
