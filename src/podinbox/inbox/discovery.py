"""
Inbox Discovery

Finds the inbox of a user by reading the ldp:inbox reference off one of their
documents, usually a WebID profile.
"""

import logging

from rdflib import URIRef

from podinbox.core.errors import NoInboxDeclared
from podinbox.graph.client import PodClient, document_url
from podinbox.graph.vocab import LDP_INBOX

logger = logging.getLogger(__name__)


async def discover_inbox(pod: PodClient, document_location: str) -> str:
    """
    Resolve the inbox referenced by a document.

    The document subject is checked first (for a profile like
    https://pod.example/alice/profile/card#me that is the WebID itself, then
    the document), then any subject in the document that declares an inbox.

    Args:
        pod: Pod client
        document_location: Document or subject IRI

    Returns:
        The inbox location

    Raises:
        NoInboxDeclared: the document has no ldp:inbox reference
        NotFound, Forbidden, NetworkFailure, MalformedGraph: reading the document failed
    """
    location = document_url(document_location)
    graph = await pod.read_graph(location)

    for subject in (document_location, location):
        inbox = graph.value(URIRef(subject), LDP_INBOX)
        if inbox is not None:
            return str(inbox)

    declared = sorted(str(o) for o in graph.objects(None, LDP_INBOX))
    if declared:
        if len(declared) > 1:
            logger.debug(f"{location} declares {len(declared)} inboxes, using {declared[0]}")
        return declared[0]

    raise NoInboxDeclared(f"{document_location} does not declare an inbox")
