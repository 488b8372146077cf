"""
podinbox Graph Layer

Linked-data plumbing shared by the inbox components.

Components:
- Vocabulary: the namespaces and terms podinbox reads and writes
- Codec: Turtle encoding and decoding of ACL and notification documents
- PodClient: HTTP graph client for a pod
"""

from podinbox.graph.client import PodClient
from podinbox.graph.codec import decode, encode
from podinbox.graph.vocab import Vocabulary

__all__ = ["PodClient", "Vocabulary", "decode", "encode"]
