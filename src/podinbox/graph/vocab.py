"""
Supported Vocabularies

Every namespace podinbox reads or writes is a member of Vocabulary. Terms are
built from the enumeration, never by splitting prefixed strings at runtime.
"""

from enum import Enum

from rdflib import Namespace, URIRef


class Vocabulary(str, Enum):
    """Namespaces known to the codec, valued by their IRI."""

    ACL = "http://www.w3.org/ns/auth/acl#"
    FOAF = "http://xmlns.com/foaf/0.1/"
    RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
    XSD = "http://www.w3.org/2001/XMLSchema#"
    LDP = "http://www.w3.org/ns/ldp#"
    SOLID = "http://www.w3.org/ns/solid/terms#"
    AS = "https://www.w3.org/ns/activitystreams#"
    SCHEMA = "https://schema.org/"

    @property
    def prefix(self) -> str:
        return self.name.lower()

    @property
    def ns(self) -> Namespace:
        return Namespace(self.value)

    def term(self, name: str) -> URIRef:
        return URIRef(f"{self.value}{name}")


RDF_TYPE = Vocabulary.RDF.term("type")

# ACL documents
ACL_AUTHORIZATION = Vocabulary.ACL.term("Authorization")
ACL_AGENT = Vocabulary.ACL.term("agent")
ACL_AGENT_CLASS = Vocabulary.ACL.term("agentClass")
ACL_ACCESS_TO = Vocabulary.ACL.term("accessTo")
ACL_DEFAULT = Vocabulary.ACL.term("default")
ACL_MODE = Vocabulary.ACL.term("mode")
FOAF_AGENT = Vocabulary.FOAF.term("Agent")

# Notification documents
NOTIFICATION_TYPE = Vocabulary.AS.term("Announce")
TITLE = Vocabulary.AS.term("summary")
CONTENT = Vocabulary.AS.term("content")
PUBLISHED = Vocabulary.AS.term("published")
READ = Vocabulary.SOLID.term("read")

# Containers and discovery
LDP_CONTAINS = Vocabulary.LDP.term("contains")
LDP_INBOX = Vocabulary.LDP.term("inbox")

NOTIFICATION_PREDICATES: frozenset[URIRef] = frozenset(
    {RDF_TYPE, TITLE, CONTENT, PUBLISHED, READ}
)


def mode_term(mode: str) -> URIRef:
    """ACL term for an access mode name (Read, Write, Append, Control)."""
    return Vocabulary.ACL.term(mode)


def is_absolute_iri(value: str) -> bool:
    """True for IRIs with a scheme and no whitespace."""
    scheme, sep, rest = value.partition(":")
    return bool(sep and scheme and rest) and not any(c.isspace() for c in value)
