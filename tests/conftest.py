"""
Shared test fixtures for the podinbox test suite.

Provides fixtures for:
- An in-memory pod served through httpx.MockTransport
- A connected PodClient talking to it
- Notification sessions bound to a test owner
"""

from typing import AsyncGenerator
from urllib.parse import urlsplit

import httpx
import pytest
import pytest_asyncio
from rdflib import Graph

from podinbox.core.models import PodConfig
from podinbox.graph.client import PodClient
from podinbox.inbox.state import NotificationState, PodSession

ALICE = "https://pod.example/alice"
ALICE_INBOX = "https://pod.example/alice/inbox"
ALICE_PROFILE = "https://pod.example/alice/profile/card"
BOB = "https://pod.example/bob/profile/card#me"
BOB_INBOX = "https://pod.example/bob/inbox"


# =============================================================================
# In-memory Pod
# =============================================================================


class FakePod:
    """
    Minimal linked-data pod kept in memory.

    Resources are stored as Turtle text keyed by location without trailing
    slash. Containers are created implicitly by PUT and list their direct
    children through ldp:contains. PATCH applies SPARQL Update with rdflib.
    Individual (method, location) pairs can be made to fail with a status.
    """

    def __init__(self) -> None:
        self.resources: dict[str, str] = {}
        self.containers: set[str] = set()
        self.requests: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], int] = {}
        self.transport = httpx.MockTransport(self.handle)

    @staticmethod
    def key(url: str) -> str:
        return str(url).split("?", 1)[0].rstrip("/")

    def seed(self, url: str, body: str) -> None:
        """Store a resource without going through HTTP."""
        url = self.key(url)
        self._make_parents(url)
        self.resources[url] = body

    def fail(self, method: str, url: str, status: int) -> None:
        self.failures[(method, self.key(url))] = status

    def writes(self) -> list[tuple[str, str]]:
        return [r for r in self.requests if r[0] in ("PUT", "PATCH", "DELETE")]

    def children(self, container: str) -> list[str]:
        members = []
        for url in sorted(self.resources):
            if url.rsplit("/", 1)[0] == container and not url.endswith(".acl"):
                members.append(url)
        for url in sorted(self.containers):
            if url.rsplit("/", 1)[0] == container:
                members.append(url + "/")
        return members

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        url = self.key(str(request.url))
        self.requests.append((method, url))

        status = self.failures.get((method, url))
        if status:
            return httpx.Response(status)

        if method == "GET":
            return self._get(url)
        if method == "PUT":
            self.seed(url, request.content.decode("utf-8"))
            return httpx.Response(201)
        if method == "DELETE":
            return self._delete(url)
        if method == "PATCH":
            return self._patch(url, request.content.decode("utf-8"))
        return httpx.Response(405)

    def _get(self, url: str) -> httpx.Response:
        headers = {"Content-Type": "text/turtle"}
        if url in self.containers:
            lines = ["@prefix ldp: <http://www.w3.org/ns/ldp#> ."]
            for member in self.children(url):
                lines.append(f"<{url}/> ldp:contains <{member}> .")
            return httpx.Response(200, text="\n".join(lines), headers=headers)
        if url in self.resources:
            return httpx.Response(200, text=self.resources[url], headers=headers)
        return httpx.Response(404)

    def _delete(self, url: str) -> httpx.Response:
        if url in self.containers:
            if self.children(url):
                return httpx.Response(409)
            self.containers.discard(url)
            self.resources.pop(f"{url}/.acl", None)
            return httpx.Response(200)
        if url in self.resources:
            del self.resources[url]
            return httpx.Response(200)
        return httpx.Response(404)

    def _patch(self, url: str, update: str) -> httpx.Response:
        if url not in self.resources:
            return httpx.Response(404)
        graph = Graph()
        graph.parse(data=self.resources[url], format="turtle", publicID=url)
        graph.update(update)
        self.resources[url] = graph.serialize(format="turtle")
        return httpx.Response(200)

    def _make_parents(self, url: str) -> None:
        parts = urlsplit(url)
        root = f"{parts.scheme}://{parts.netloc}"
        segments = [s for s in parts.path.split("/") if s][:-1]
        for i in range(1, len(segments) + 1):
            self.containers.add(root + "/" + "/".join(segments[:i]))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_pod() -> FakePod:
    """Provide an empty in-memory pod."""
    return FakePod()


@pytest_asyncio.fixture
async def pod(fake_pod: FakePod) -> AsyncGenerator[PodClient, None]:
    """Provide a PodClient connected to the in-memory pod."""
    client = PodClient(PodConfig(), transport=fake_pod.transport)
    await client.connect()
    yield client
    await client.disconnect()


@pytest.fixture
def session(pod: PodClient) -> PodSession:
    """Provide a session owned by Alice."""
    return PodSession(pod, owner=ALICE)


@pytest.fixture
def notification_state(session: PodSession) -> NotificationState:
    """Provide a ready notification state for Alice."""
    return NotificationState(session)


def notification_turtle(
    location: str,
    title: str = "Hello",
    published: str = "2024-05-01T10:00:00+00:00",
    read: str = "false",
) -> str:
    """Hand-written notification document, as another client might store it."""
    return (
        "@prefix as: <https://www.w3.org/ns/activitystreams#> .\n"
        "@prefix solid: <http://www.w3.org/ns/solid/terms#> .\n"
        "@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .\n"
        f"<{location}> as:summary \"{title}\" ;\n"
        f"    as:content \"Body of {title}\" ;\n"
        f"    as:published \"{published}\"^^xsd:dateTime ;\n"
        f"    solid:read {read} .\n"
    )
