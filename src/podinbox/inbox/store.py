"""
Notification Store

Creates, reads, updates and deletes notification documents inside inboxes.

Usage:
    store = NotificationStore(pod)
    notification = await store.create(
        "https://pod.example/alice/inbox",
        title="Hello",
        content="World",
    )
    await store.mark_as_read(notification.location, True)
    notifications = await store.fetch(["https://pod.example/alice/inbox"])
"""

import logging
from datetime import datetime, UTC
from typing import Iterable
from uuid import uuid4

from rdflib import Literal

from podinbox.core.constants import INBOX_RESERVED_NAMES, NOTIFICATION_CUSTOM_COUNT_MAX
from podinbox.core.errors import MalformedGraph, SchemaMismatch
from podinbox.core.models import (
    Ack,
    DocumentKind,
    NotificationOptions,
    NotificationResource,
    NotificationShape,
)
from podinbox.graph.client import PodClient
from podinbox.graph.codec import encode, read_boolean, read_datetime, subject_values
from podinbox.graph.vocab import (
    CONTENT,
    NOTIFICATION_PREDICATES,
    PUBLISHED,
    READ,
    TITLE,
    is_absolute_iri,
)
from podinbox.inbox.shape import check_shape

logger = logging.getLogger(__name__)


def inbox_name(location: str) -> str:
    """Name of an inbox: the last segment of its location."""
    return location.rstrip("/").rsplit("/", 1)[-1]


class NotificationStore:
    """
    Stores notifications as Turtle documents in inbox containers.

    A notification lives at <inbox>/<id>, where id is a fresh uuid4. The
    read flag is stored as an xsd:boolean and normalized to bool on read.
    """

    def __init__(self, pod: PodClient, shape: NotificationShape | None = None) -> None:
        self._pod = pod
        self.shape = shape

    async def create(
        self,
        inbox_root: str,
        title: str,
        content: str,
        options: NotificationOptions | None = None,
    ) -> NotificationResource:
        """
        Write a new notification into an inbox.

        The write is an unconditional PUT; ids are random so collisions are
        not checked.

        Args:
            inbox_root: Inbox container location
            title: Notification title
            content: Notification body
            options: Custom triples and an optional publication time

        Returns:
            The created notification

        Raises:
            SchemaMismatch: a custom predicate is invalid or the shape is not satisfied
        """
        options = options or NotificationOptions()
        self._validate(options)

        notification_id = str(uuid4())
        root = inbox_root.rstrip("/")
        notification = NotificationResource(
            id=notification_id,
            location=f"{root}/{notification_id}",
            title=title,
            content=content,
            published=options.published or datetime.now(UTC),
            read=False,
            inbox_name=inbox_name(root),
            custom=list(options.custom),
        )

        document = encode(DocumentKind.NOTIFICATION, notification.location, notification)
        await self._pod.write(notification.location, document)

        logger.info(f"Created notification {notification.location}")
        return notification

    async def delete(self, location: str) -> Ack:
        """
        Delete a notification.

        Raises:
            NotFound: the notification does not exist
            Forbidden: access was denied
        """
        await self._pod.delete(location)
        return Ack(code=200, message="Notification was deleted")

    async def mark_as_read(self, location: str, status: bool | str = True) -> Ack:
        """
        Set the read flag of a notification.

        Only the read triple changes; the rest of the document is untouched.
        """
        if not isinstance(status, bool):
            status = read_boolean(status)

        await self._pod.update(location, READ, Literal(status))
        return Ack(code=200, message="Notification was updated")

    async def fetch(self, inbox_locations: Iterable[str]) -> list[NotificationResource]:
        """
        Read every notification in the given inboxes.

        Members that cannot be read as a notification are logged and
        skipped; the rest of the inbox is still returned.

        Returns:
            Notifications in server order (member IRI order, inbox by inbox)
        """
        notifications: list[NotificationResource] = []

        for inbox in inbox_locations:
            root = inbox.rstrip("/")
            name = inbox_name(root)
            members = await self._pod.list(root)

            for member in members:
                member_id = inbox_name(member)
                if member.endswith("/") or member_id in INBOX_RESERVED_NAMES:
                    continue

                try:
                    notification = await self._read(member, f"{root}/{member_id}", name)
                except MalformedGraph as e:
                    logger.warning(f"Skipping unreadable notification {member}: {e}")
                    continue

                notifications.append(notification)

        return notifications

    async def _read(self, member: str, location: str, name: str) -> NotificationResource:
        graph = await self._pod.read_graph(member)
        values = subject_values(graph, location) or subject_values(graph, member)

        if TITLE not in values:
            raise MalformedGraph(f"{member} has no title")
        if PUBLISHED not in values:
            raise MalformedGraph(f"{member} has no publication time")

        return NotificationResource(
            id=inbox_name(location),
            location=location,
            title=str(values[TITLE]),
            content=str(values.get(CONTENT, "")),
            published=read_datetime(values[PUBLISHED]),
            read=read_boolean(values[READ]) if READ in values else False,
            inbox_name=name,
        )

    def _validate(self, options: NotificationOptions) -> None:
        if len(options.custom) > NOTIFICATION_CUSTOM_COUNT_MAX:
            raise SchemaMismatch(
                f"Too many custom triples ({len(options.custom)} > {NOTIFICATION_CUSTOM_COUNT_MAX})"
            )

        for triple in options.custom:
            if not is_absolute_iri(triple.predicate):
                raise SchemaMismatch(f"Custom predicate must be a full IRI: {triple.predicate!r}")
            if triple.subject is not None and not is_absolute_iri(triple.subject):
                raise SchemaMismatch(f"Custom subject must be a full IRI: {triple.subject!r}")

        if self.shape:
            supplied = {str(p) for p in NOTIFICATION_PREDICATES}
            supplied.update(t.predicate for t in options.custom)
            check_shape(self.shape, supplied)
