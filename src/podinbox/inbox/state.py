"""
Notification State

The facade a UI talks to. Holds the local view of a user's notifications and
forwards commands to the inbox manager, the notification store and discovery.

Usage:
    async with PodClient() as pod:
        notifications = NotificationState(PodSession(pod))
        notifications.set_owner("https://pod.example/alice/profile/card#me")

        await notifications.create_inbox("https://pod.example/alice/inbox")
        await notifications.fetch_notification(["https://pod.example/alice/inbox"])
        print(notifications.unread)

The session is an explicit value; nothing here is process-wide. The local
view is best effort: call fetch_notification after changes made elsewhere.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from podinbox.core.errors import NotReady, PodInboxError
from podinbox.core.models import Ack, NotificationOptions, NotificationResource, NotificationShape
from podinbox.graph.client import PodClient
from podinbox.graph.codec import read_boolean
from podinbox.inbox.discovery import discover_inbox
from podinbox.inbox.manager import InboxManager
from podinbox.inbox.policy import validate_agent
from podinbox.inbox.store import NotificationStore

logger = logging.getLogger(__name__)

DesyncListener = Callable[[str, PodInboxError], None]


class SessionState(str, Enum):
    """Lifecycle of a notification session."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass
class PodSession:
    """Everything a command needs: the pod client and who is acting."""

    pod: PodClient
    owner: str | None = None
    shape: NotificationShape | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.READY if self.owner else SessionState.UNINITIALIZED

    def bind_owner(self, owner: str) -> None:
        self.owner = validate_agent(owner)


class NotificationState:
    """
    Local notification view plus the commands that change it.

    Attributes:
        notifications: Working view, possibly filtered by inbox name
        original_notifications: Everything fetched, newest first
        unread: Count of unread entries in original_notifications
        desynchronized: True when a remote update failed after the local
            view was already changed; cleared by fetch_notification
    """

    def __init__(self, session: PodSession) -> None:
        self.session = session
        self.notifications: list[NotificationResource] = []
        self.original_notifications: list[NotificationResource] = []
        self.unread = 0
        self.desynchronized = False
        self.active_filter: str | None = None

        self._inboxes = InboxManager(session.pod)
        self._store = NotificationStore(session.pod, session.shape)
        self._listeners: list[DesyncListener] = []

    @property
    def state(self) -> SessionState:
        return self.session.state

    def set_owner(self, owner: str) -> None:
        """Bind the owning agent. Moves the session to READY."""
        self.session.bind_owner(owner)
        logger.info(f"Notification session ready for {owner}")

    def on_desync(self, listener: DesyncListener) -> None:
        """Register a callback for failed remote read-flag updates."""
        self._listeners.append(listener)

    def _require_ready(self) -> None:
        if self.session.state is not SessionState.READY:
            raise NotReady("No owner is bound to this session; call set_owner first")

    # =========================================================================
    # Inboxes
    # =========================================================================

    async def create_inbox(
        self,
        location: str,
        owner: str | None = None,
        declare_in: str | None = None,
    ) -> Ack:
        """
        Create an inbox, owned by the session owner unless told otherwise.

        With declare_in, the subject gets an ldp:inbox link to the new inbox
        so discover_inbox can find it.
        """
        self._require_ready()
        return await self._inboxes.create_inbox(
            location,
            owner or self.session.owner,
            declare_in=declare_in,
        )

    async def delete_inbox(self, location: str) -> Ack:
        """Delete an inbox and drop its notifications from the local view."""
        self._require_ready()
        ack = await self._inboxes.delete_inbox(location)

        prefix = location.rstrip("/") + "/"
        self._drop(lambda n: n.location.startswith(prefix))
        return ack

    async def discover_inbox(self, document: str) -> str:
        """Find the inbox referenced by a document."""
        return await discover_inbox(self.session.pod, document)

    # =========================================================================
    # Notifications
    # =========================================================================

    async def create_notification(
        self,
        inbox_root: str,
        title: str,
        content: str,
        options: NotificationOptions | None = None,
    ) -> NotificationResource:
        """Write a notification into an inbox."""
        self._require_ready()
        return await self._store.create(inbox_root, title, content, options)

    async def send_notification(
        self,
        document: str,
        title: str,
        content: str,
        options: NotificationOptions | None = None,
    ) -> NotificationResource:
        """Discover the inbox referenced by document, then write into it."""
        self._require_ready()
        inbox = await self.discover_inbox(document)
        return await self._store.create(inbox, title, content, options)

    async def delete_notification(self, location: str) -> Ack:
        """Delete a notification and drop it from the local view."""
        self._require_ready()
        ack = await self._store.delete(location)
        self._drop(lambda n: n.location == location)
        return ack

    async def fetch_notification(self, inboxes: Iterable[str]) -> list[NotificationResource]:
        """
        Rebuild the local view from the given inboxes.

        Entries are ordered newest first; entries published at the same time
        keep server order.
        """
        self._require_ready()
        fetched = await self._store.fetch(inboxes)

        self.original_notifications = sorted(fetched, key=lambda n: n.published, reverse=True)
        self.unread = sum(1 for n in self.original_notifications if n.read is False)
        self.desynchronized = False
        self.notifications = self._filtered(self.active_filter)

        logger.debug(f"Fetched {len(fetched)} notifications, {self.unread} unread")
        return self.notifications

    def filter_notification(self, inbox_name: str | None = None) -> list[NotificationResource]:
        """Restrict the working view to one inbox; no argument shows everything."""
        self.active_filter = inbox_name or None
        self.notifications = self._filtered(self.active_filter)
        return self.notifications

    async def mark_as_read_notification(
        self,
        location: str,
        id: str | None = None,
        status: bool | str = True,
    ) -> Ack:
        """
        Mark a notification read (or unread) locally, then on the pod.

        The local entry and the unread count change before the remote call.
        If the remote call fails the local change is kept, the view is flagged
        desynchronized, listeners are told, and the error is raised.
        """
        self._require_ready()
        if not isinstance(status, bool):
            status = read_boolean(status)

        if id:
            self._set_read(id, status)

        try:
            return await self._store.mark_as_read(location, status)
        except PodInboxError as e:
            self.desynchronized = True
            logger.warning(f"Read flag of {location} not updated on the pod: {e}")
            for listener in self._listeners:
                listener(location, e)
            raise

    # =========================================================================
    # Local view
    # =========================================================================

    def _filtered(self, inbox_name: str | None) -> list[NotificationResource]:
        if not inbox_name:
            return list(self.original_notifications)
        return [n for n in self.original_notifications if n.inbox_name == inbox_name]

    def _set_read(self, id: str, status: bool) -> None:
        # Filtered views share entries with original_notifications
        entry = next((n for n in self.original_notifications if n.id == id), None)
        if entry is None or entry.read == status:
            return

        entry.read = status
        if status:
            self.unread = max(self.unread - 1, 0)
        else:
            self.unread += 1

    def _drop(self, predicate: Callable[[NotificationResource], bool]) -> None:
        self.original_notifications = [n for n in self.original_notifications if not predicate(n)]
        self.notifications = [n for n in self.notifications if not predicate(n)]
        self.unread = sum(1 for n in self.original_notifications if n.read is False)
