"""
Pod Graph Client

HTTP access to linked-data resources on a pod. Wraps httpx and maps every
failure onto the podinbox error kinds.

Usage:
    async with PodClient() as pod:
        if await pod.exists("https://pod.example/alice/inbox"):
            members = await pod.list("https://pod.example/alice/inbox")
            values = await pod.read(members[0])
"""

from __future__ import annotations

import logging
from urllib.parse import urldefrag

import httpx
from rdflib import Graph, Literal, URIRef
from rdflib.term import Node

from podinbox.core.config import get_config
from podinbox.core.constants import CONTENT_TYPE_SPARQL_UPDATE, CONTENT_TYPE_TURTLE
from podinbox.core.errors import Forbidden, NetworkFailure, NotFound
from podinbox.core.models import PodConfig
from podinbox.graph.codec import decode, subject_values
from podinbox.graph.vocab import LDP_CONTAINS

logger = logging.getLogger(__name__)


def container_url(location: str) -> str:
    """Container IRIs end with a slash."""
    return location.rstrip("/") + "/"


def document_url(subject: str) -> str:
    """The document holding a subject is its IRI without the fragment."""
    return urldefrag(subject).url


def raise_for_status(method: str, url: str, response: httpx.Response) -> None:
    """Translate an unsuccessful response into an error kind."""
    if response.is_success:
        return

    status = response.status_code
    message = f"{method} {url} returned {status}"
    if status in (404, 410):
        raise NotFound(message, status)
    if status in (401, 403):
        raise Forbidden(message, status)
    raise NetworkFailure(message, status)


class PodClient:
    """
    Graph client for a pod.

    Exposes plain HTTP verbs plus the graph-level operations the inbox layer
    needs: read a subject, write a document, list a container, add a triple
    and update a single triple in place.
    """

    def __init__(
        self,
        config: PodConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_config().pod
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Open the underlying HTTP client."""
        headers = {"User-Agent": self._config.user_agent}
        if self._config.auth_token:
            headers["Authorization"] = f"Bearer {self._config.auth_token}"

        self._client = httpx.AsyncClient(
            timeout=self._config.http_timeout_secs,
            verify=self._config.verify_tls,
            headers=headers,
            transport=self._transport,
            follow_redirects=True,
        )

    async def disconnect(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> PodClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    # =========================================================================
    # HTTP verbs
    # =========================================================================

    async def request(
        self,
        method: str,
        url: str,
        content: str | bytes | None = None,
        content_type: str | None = None,
    ) -> httpx.Response:
        """Send a request, raising an error kind on failure."""
        if not self._client:
            await self.connect()

        headers = {"Accept": CONTENT_TYPE_TURTLE}
        if content_type:
            headers["Content-Type"] = content_type

        logger.debug(f"{method} {url}")
        try:
            response = await self._client.request(
                method,
                url,
                content=content,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise NetworkFailure(f"{method} {url} failed: {e}") from e

        raise_for_status(method, url, response)
        return response

    async def get(self, url: str) -> httpx.Response:
        return await self.request("GET", url)

    async def put(
        self,
        url: str,
        body: str | bytes = b"",
        content_type: str = CONTENT_TYPE_TURTLE,
    ) -> httpx.Response:
        return await self.request("PUT", url, content=body, content_type=content_type)

    async def delete(self, url: str) -> httpx.Response:
        return await self.request("DELETE", url)

    async def patch(self, url: str, update: str) -> httpx.Response:
        return await self.request(
            "PATCH",
            url,
            content=update,
            content_type=CONTENT_TYPE_SPARQL_UPDATE,
        )

    async def exists(self, url: str) -> bool:
        """Check a resource with GET. A 404 means it does not exist."""
        try:
            await self.get(url)
        except NotFound:
            return False
        return True

    # =========================================================================
    # Graph operations
    # =========================================================================

    async def read_graph(self, url: str) -> Graph:
        """Fetch and parse a Turtle document."""
        response = await self.get(url)
        return decode(response.text, base=url)

    async def read(self, subject: str, document: str | None = None) -> dict[URIRef, Node]:
        """
        Read the predicates of a subject.

        Args:
            subject: Subject IRI
            document: Document holding the subject (defaults to the subject without fragment)

        Returns:
            Mapping of predicate to object
        """
        graph = await self.read_graph(document or document_url(subject))
        return subject_values(graph, subject)

    async def write(self, location: str, document: str) -> None:
        """Create or overwrite a Turtle document."""
        await self.put(location, document, content_type=CONTENT_TYPE_TURTLE)

    async def list(self, container: str) -> list[str]:
        """
        List the members of a container.

        Members come back sorted by IRI so callers see a stable order.
        """
        graph = await self.read_graph(container_url(container))
        members = {str(member) for member in graph.objects(None, LDP_CONTAINS)}
        return sorted(members)

    async def update(
        self,
        subject: str,
        predicate: URIRef,
        value: Literal,
        document: str | None = None,
    ) -> None:
        """
        Replace the value of one predicate without rewriting the document.

        Sends a single SPARQL Update PATCH whose WHERE clause matches the
        current objects, whatever they are by the time the server applies
        it. Other triples of the document are untouched.
        """
        location = document or document_url(subject)
        node = URIRef(subject).n3()
        term = predicate.n3()

        update = (
            f"DELETE {{ {node} {term} ?value . }}\n"
            f"INSERT {{ {node} {term} {value.n3()} . }}\n"
            f"WHERE {{ OPTIONAL {{ {node} {term} ?value . }} }}"
        )
        await self.patch(location, update)

    async def insert(
        self,
        subject: str,
        predicate: URIRef,
        obj: Node,
        document: str | None = None,
    ) -> None:
        """Add one triple to an existing document."""
        location = document or document_url(subject)
        await self.patch(
            location,
            f"INSERT DATA {{ {URIRef(subject).n3()} {predicate.n3()} {obj.n3()} . }}",
        )
