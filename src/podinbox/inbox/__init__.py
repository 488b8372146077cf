"""
podinbox Inboxes

Notification inboxes on a pod.

Components:
- Policy: the owner and public authorization entries of an inbox
- InboxManager: create and delete inbox containers
- NotificationStore: create, read, update and delete notifications
- Discovery: find a user's inbox from one of their documents
- NotificationState: local view and command facade

Usage:
    from podinbox.graph import PodClient
    from podinbox.inbox import NotificationState, PodSession

    async with PodClient() as pod:
        notifications = NotificationState(PodSession(pod))
        notifications.set_owner("https://pod.example/alice/profile/card#me")
        await notifications.create_inbox("https://pod.example/alice/inbox")
        await notifications.send_notification(
            "https://pod.example/bob/profile/card#me",
            title="Hello",
            content="World",
        )
"""

from podinbox.inbox.discovery import discover_inbox
from podinbox.inbox.manager import InboxManager
from podinbox.inbox.policy import build_entries, validate_agent
from podinbox.inbox.shape import check_shape, load_shape, parse_shape
from podinbox.inbox.state import NotificationState, PodSession, SessionState
from podinbox.inbox.store import NotificationStore, inbox_name

__all__ = [
    "InboxManager",
    "NotificationState",
    "NotificationStore",
    "PodSession",
    "SessionState",
    "build_entries",
    "check_shape",
    "discover_inbox",
    "inbox_name",
    "load_shape",
    "parse_shape",
    "validate_agent",
]
