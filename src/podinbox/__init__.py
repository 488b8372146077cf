"""
podinbox - Notification inboxes for personal data stores

An async client for linked-data pods that:
- Creates inbox containers that anyone may append to but only the owner may read
- Sends notifications as small RDF documents into those inboxes
- Discovers where another user's inbox lives from one of their documents
- Keeps a local read/unread view in step with the server

Components:
- graph: vocabulary, Turtle codec and the HTTP graph client
- inbox: access policy, inbox manager, notification store, discovery, state
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
