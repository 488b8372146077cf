"""
Inbox Access Policy

Builds the two authorization entries every inbox carries:
- owner: Read, Write and Control for the inbox owner
- public: Append only, for any agent

Anyone can drop a notification into the inbox; only the owner can read it.
"""

from urllib.parse import urlparse

from podinbox.core.errors import InvalidAgent
from podinbox.core.models import AccessControlEntry, AccessMode, SubjectTag
from podinbox.graph.vocab import FOAF_AGENT

OWNER_MODES = frozenset({AccessMode.READ, AccessMode.WRITE, AccessMode.CONTROL})
PUBLIC_MODES = frozenset({AccessMode.APPEND})


def validate_agent(agent: str) -> str:
    """
    Check that an agent identifier is an absolute http(s) IRI.

    Raises:
        InvalidAgent: the identifier is empty, relative or not http(s)
    """
    if not isinstance(agent, str) or not agent.strip():
        raise InvalidAgent("Agent identifier is empty")

    parsed = urlparse(agent)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidAgent(f"Agent identifier must be an absolute http(s) IRI: {agent!r}")
    if any(c.isspace() for c in agent):
        raise InvalidAgent(f"Agent identifier contains whitespace: {agent!r}")

    return agent


def build_entries(
    owner_agent: str,
    access_to: str = "./",
) -> tuple[AccessControlEntry, AccessControlEntry]:
    """
    Build the owner and public entries for an inbox.

    Args:
        owner_agent: WebID of the inbox owner
        access_to: Container the entries protect

    Returns:
        (owner_entry, public_entry)
    """
    validate_agent(owner_agent)

    owner = AccessControlEntry(
        subject_tag=SubjectTag.OWNER,
        agent=owner_agent,
        access_to=access_to,
        default=access_to,
        modes=OWNER_MODES,
    )
    public = AccessControlEntry(
        subject_tag=SubjectTag.PUBLIC,
        agent_class=str(FOAF_AGENT),
        access_to=access_to,
        default=access_to,
        modes=PUBLIC_MODES,
    )
    return owner, public
