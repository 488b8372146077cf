"""
Inbox Manager

Creates and deletes inbox containers together with their access-control
resource.

Creation is a two-step protocol: a placeholder marker is written to force the
container into existence, then the ACL is written next to it. The two writes
are not atomic. If the ACL write fails the container is left unprotected and
PartialInboxCreation is raised; calling create_inbox again notices the missing
ACL and re-applies it.
"""

import logging

from rdflib import URIRef

from podinbox.core.constants import CONTENT_TYPE_TURTLE, INBOX_ACL_NAME, INBOX_MARKER_NAME
from podinbox.core.errors import NotFound, PartialInboxCreation, PodInboxError
from podinbox.core.models import Ack, DocumentKind
from podinbox.graph.client import PodClient, container_url
from podinbox.graph.codec import encode
from podinbox.graph.vocab import LDP_INBOX
from podinbox.inbox.policy import build_entries, validate_agent

logger = logging.getLogger(__name__)


def acl_location(location: str) -> str:
    """Location of the access-control resource of an inbox."""
    return f"{location.rstrip('/')}/{INBOX_ACL_NAME}"


def marker_location(location: str) -> str:
    """Location of the placeholder that forces container creation."""
    return f"{location.rstrip('/')}/{INBOX_MARKER_NAME}"


class InboxManager:
    """Manages inbox containers on a pod."""

    def __init__(self, pod: PodClient) -> None:
        self._pod = pod

    async def exists(self, location: str) -> bool:
        """Check whether an inbox container exists. Never cached."""
        return await self._pod.exists(location)

    async def create_inbox(
        self,
        location: str,
        owner_agent: str,
        declare_in: str | None = None,
    ) -> Ack:
        """
        Create an inbox owned by owner_agent.

        Existing inboxes are left untouched, except that a missing ACL left by
        an earlier partial creation is written again.

        Args:
            location: Container location, e.g. https://pod.example/alice/inbox
            owner_agent: WebID of the owner
            declare_in: Subject (usually a WebID or an app container) that
                should point at the inbox through ldp:inbox, so discovery finds it

        Returns:
            Ack

        Raises:
            InvalidAgent: owner_agent is not a valid agent identifier
            PartialInboxCreation: the container exists but its ACL could not be written
        """
        validate_agent(owner_agent)

        if await self.exists(location):
            if await self._pod.exists(acl_location(location)):
                logger.debug(f"Inbox {location} already exists")
                ack = Ack(code=200, message="Inbox already exists")
            else:
                logger.warning(f"Inbox {location} has no access control, re-applying it")
                await self._write_acl(location, owner_agent)
                ack = Ack(code=200, message="Inbox access control was restored")
        else:
            await self._pod.put(marker_location(location), b"", content_type=CONTENT_TYPE_TURTLE)
            await self._write_acl(location, owner_agent)
            logger.info(f"Created inbox {location} for {owner_agent}")
            ack = Ack(code=200, message="Inbox was created")

        if declare_in:
            await self.declare_inbox(location, declare_in)
        return ack

    async def declare_inbox(self, location: str, subject: str) -> None:
        """
        Publish the inbox on a subject with an ldp:inbox triple.

        The triple is added with INSERT DATA, so declaring twice is harmless.
        The document holding the subject must already exist.
        """
        await self._pod.insert(subject, LDP_INBOX, URIRef(container_url(location)))
        logger.info(f"Declared inbox {location} on {subject}")

    async def delete_inbox(self, location: str) -> Ack:
        """
        Delete an inbox and everything in it.

        Members are deleted one by one, nested containers depth first, before
        the ACL and the container, so the result does not depend on whether
        the server cascades deletes.

        Raises:
            NotFound: the inbox does not exist
        """
        if not await self.exists(location):
            raise NotFound(f"Inbox {location} does not exist", 404)

        count = await self._delete_container(location)

        logger.info(f"Deleted inbox {location} ({count} members)")
        return Ack(code=200, message="Inbox was deleted")

    async def _delete_container(self, location: str) -> int:
        members = await self._pod.list(location)
        for member in members:
            if member.endswith("/"):
                await self._delete_container(member)
            else:
                await self._pod.delete(member)

        try:
            await self._pod.delete(acl_location(location))
        except NotFound:
            logger.debug(f"Container {location} had no access-control resource")

        await self._pod.delete(container_url(location))
        return len(members)

    async def _write_acl(self, location: str, owner_agent: str) -> None:
        acl = acl_location(location)
        entries = build_entries(owner_agent, access_to=container_url(location))
        document = encode(DocumentKind.ACL, acl, entries)

        try:
            await self._pod.write(acl, document)
        except PodInboxError as e:
            raise PartialInboxCreation(
                f"Inbox {location} was created but its access control could not be written: "
                f"{e.message}",
                e.code,
            ) from e
