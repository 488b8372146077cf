"""
Graph Codec

Turtle encoding and decoding for the two documents podinbox writes:
- ACL documents: the #owner and #public authorization blocks of an inbox
- Notification documents: one notification subject plus custom triples

Usage:
    document = encode(DocumentKind.ACL, "https://pod.example/alice/inbox/.acl", entries)
    graph = decode(document, base="https://pod.example/alice/inbox/.acl")
"""

from datetime import datetime, UTC
from typing import Any, Iterable

from rdflib import Graph, Literal, URIRef
from rdflib.term import Node

from podinbox.core.errors import MalformedGraph
from podinbox.core.models import AccessControlEntry, DocumentKind, NotificationResource
from podinbox.graph.vocab import (
    ACL_ACCESS_TO,
    ACL_AGENT,
    ACL_AGENT_CLASS,
    ACL_AUTHORIZATION,
    ACL_DEFAULT,
    ACL_MODE,
    CONTENT,
    NOTIFICATION_TYPE,
    PUBLISHED,
    RDF_TYPE,
    READ,
    TITLE,
    Vocabulary,
    mode_term,
)

TURTLE = "turtle"


def new_graph() -> Graph:
    """Create an empty graph with the supported vocabularies bound."""
    graph = Graph(bind_namespaces="none")
    for vocabulary in Vocabulary:
        graph.bind(vocabulary.prefix, vocabulary.ns)
    return graph


def encode(kind: DocumentKind | str, location: str, payload: Any) -> str:
    """
    Serialize a document as Turtle.

    Args:
        kind: Document kind (acl or notification)
        location: Location of the document being written
        payload: The ACL entries, or the NotificationResource

    Returns:
        Turtle text; identical input always yields identical text
    """
    if isinstance(kind, str):
        kind = DocumentKind(kind)

    if kind is DocumentKind.ACL:
        graph = acl_graph(location, payload)
    else:
        graph = notification_graph(location, payload)

    return graph.serialize(format=TURTLE)


def decode(document: str | bytes, base: str | None = None) -> Graph:
    """
    Parse a Turtle document.

    Args:
        document: Turtle text
        base: Location the document was read from, used to resolve relative IRIs

    Returns:
        Parsed graph. Predicates outside the vocabulary are kept and ignored by readers.

    Raises:
        MalformedGraph: the document is not valid Turtle
    """
    graph = new_graph()
    if isinstance(document, bytes):
        document = document.decode("utf-8", errors="replace")
    if not document.strip():
        return graph

    try:
        graph.parse(data=document, format=TURTLE, publicID=base)
    except Exception as e:
        raise MalformedGraph(f"Could not parse {base or 'document'}: {e}") from e

    return graph


def acl_graph(location: str, entries: Iterable[AccessControlEntry]) -> Graph:
    """Build the graph of an ACL document."""
    graph = new_graph()

    for entry in entries:
        subject = URIRef(f"{location}#{entry.subject_tag.value}")
        graph.add((subject, RDF_TYPE, ACL_AUTHORIZATION))
        if entry.agent:
            graph.add((subject, ACL_AGENT, URIRef(entry.agent)))
        if entry.agent_class:
            graph.add((subject, ACL_AGENT_CLASS, URIRef(entry.agent_class)))
        graph.add((subject, ACL_ACCESS_TO, URIRef(entry.access_to)))
        if entry.default:
            graph.add((subject, ACL_DEFAULT, URIRef(entry.default)))
        for mode in sorted(entry.modes, key=lambda m: m.value):
            graph.add((subject, ACL_MODE, mode_term(mode.value)))

    return graph


def notification_graph(location: str, notification: NotificationResource) -> Graph:
    """Build the graph of a notification document."""
    graph = new_graph()
    subject = URIRef(location)

    graph.add((subject, RDF_TYPE, NOTIFICATION_TYPE))
    graph.add((subject, TITLE, Literal(notification.title)))
    graph.add((subject, CONTENT, Literal(notification.content)))
    graph.add((subject, PUBLISHED, Literal(notification.published)))
    graph.add((subject, READ, Literal(notification.read)))

    for triple in notification.custom:
        graph.add((
            URIRef(triple.subject or location),
            URIRef(triple.predicate),
            Literal(triple.value),
        ))

    return graph


def subject_values(graph: Graph, subject: str) -> dict[URIRef, Node]:
    """
    Map each predicate of a subject to one object.

    When a predicate has several objects the lexically smallest one is
    returned, so the result does not depend on parse order.
    """
    values: dict[URIRef, Node] = {}
    pairs = graph.predicate_objects(URIRef(subject))
    for predicate, obj in sorted(pairs, key=lambda po: (str(po[0]), str(po[1]))):
        values.setdefault(predicate, obj)
    return values


def read_boolean(term: Node) -> bool:
    """Normalize a boolean-like literal; anything else is malformed."""
    lexical = str(term).strip().lower()
    if lexical in ("true", "1"):
        return True
    if lexical in ("false", "0"):
        return False
    raise MalformedGraph(f"Expected a boolean, got {str(term)!r}")


def read_datetime(term: Node) -> datetime:
    """Parse an xsd:dateTime literal into a timezone-aware datetime."""
    try:
        value = datetime.fromisoformat(str(term).strip())
    except ValueError as e:
        raise MalformedGraph(f"Expected a timestamp, got {str(term)!r}") from e

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value
