"""
Tests for podinbox core data models.

Tests Pydantic model validation, enum types and the error kinds.
"""

from datetime import datetime, timedelta, timezone, UTC

import pytest
from pydantic import ValidationError

from podinbox.core.errors import (
    Forbidden,
    NetworkFailure,
    NotFound,
    NotReady,
    PartialInboxCreation,
    PodInboxError,
)
from podinbox.core.models import (
    AccessControlEntry,
    AccessMode,
    Ack,
    CustomTriple,
    DocumentKind,
    NotificationOptions,
    NotificationResource,
    NotificationShape,
    PodConfig,
    PodInboxConfig,
    ShapeField,
    SubjectTag,
)


class TestEnums:
    """Test enum values."""

    def test_access_mode(self):
        """Access modes match the ACL vocabulary term names."""
        assert AccessMode.READ == "Read"
        assert AccessMode.WRITE == "Write"
        assert AccessMode.APPEND == "Append"
        assert AccessMode.CONTROL == "Control"

    def test_subject_tag(self):
        assert SubjectTag.OWNER == "owner"
        assert SubjectTag.PUBLIC == "public"

    def test_document_kind(self):
        assert DocumentKind("acl") is DocumentKind.ACL
        with pytest.raises(ValueError):
            DocumentKind("profile")


class TestAccessControlEntry:
    """Test ACL entries."""

    def test_modes_coerced_to_enum(self):
        """Test that mode strings become AccessMode members."""
        entry = AccessControlEntry(
            subject_tag="owner",
            agent="https://pod.example/alice",
            access_to="./",
            modes=["Read", "Write"],
        )
        assert entry.subject_tag is SubjectTag.OWNER
        assert entry.modes == frozenset({AccessMode.READ, AccessMode.WRITE})

    def test_unknown_mode(self):
        with pytest.raises(ValidationError):
            AccessControlEntry(subject_tag="owner", access_to="./", modes=["Delete"])


class TestNotificationModels:
    """Test notification models."""

    def test_defaults(self):
        """Test NotificationResource with minimal fields."""
        notification = NotificationResource(
            id="1234",
            location="https://pod.example/alice/inbox/1234",
            title="Hello",
        )
        assert notification.content == ""
        assert notification.read is False
        assert notification.custom == []
        assert notification.published.tzinfo is not None

    def test_naive_published_is_utc(self):
        notification = NotificationResource(
            id="1234",
            location="https://pod.example/alice/inbox/1234",
            title="Hello",
            published=datetime(2024, 5, 1, 10, 0),
        )
        assert notification.published == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)

    def test_aware_published_kept(self):
        tokyo = timezone(timedelta(hours=9))
        notification = NotificationResource(
            id="1234",
            location="https://pod.example/alice/inbox/1234",
            title="Hello",
            published=datetime(2024, 5, 1, 19, 0, tzinfo=tokyo),
        )
        assert notification.published.utcoffset() == timedelta(hours=9)
        assert notification.published == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)

    def test_options(self):
        options = NotificationOptions(
            custom=[CustomTriple(predicate="https://schema.org/sender", value="bob")],
        )
        assert options.published is None
        assert options.custom[0].subject is None


class TestShapeModels:
    """Test shape models."""

    def test_required_predicates(self):
        shape = NotificationShape(fields=[
            ShapeField(predicate="https://schema.org/sender"),
            ShapeField(predicate="https://schema.org/about", required=False),
        ])
        assert shape.name == "notification"
        assert shape.required_predicates == ["https://schema.org/sender"]


class TestAck:
    """Test the success envelope."""

    def test_default_code(self):
        ack = Ack(message="Inbox was created")
        assert ack.code == 200
        assert ack.model_dump() == {"code": 200, "message": "Inbox was created"}


class TestConfigModels:
    """Test configuration models."""

    def test_pod_config_defaults(self):
        config = PodConfig()
        assert config.auth_token == ""
        assert config.http_timeout_secs == 30.0
        assert config.verify_tls is True
        assert config.user_agent.startswith("podinbox/")

    def test_podinbox_config_defaults(self):
        config = PodInboxConfig()
        assert isinstance(config.pod, PodConfig)
        assert config.owner_webid == ""
        assert config.default_inbox == ""


class TestErrors:
    """Test the error kinds."""

    @pytest.mark.parametrize("error_class,kind", [
        (NetworkFailure, "network_failure"),
        (NotFound, "not_found"),
        (Forbidden, "forbidden"),
        (NotReady, "not_ready"),
        (PartialInboxCreation, "partial_inbox_creation"),
    ])
    def test_kinds(self, error_class, kind):
        error = error_class("failed")
        assert isinstance(error, PodInboxError)
        assert error.kind == kind

    def test_to_dict(self):
        error = NotFound("GET https://pod.example/x returned 404", 404)
        assert error.to_dict() == {
            "kind": "not_found",
            "message": "GET https://pod.example/x returned 404",
            "code": 404,
        }

    def test_str(self):
        assert str(Forbidden("denied", 403)) == "denied (status 403)"
        assert str(NetworkFailure("connection refused")) == "connection refused"
