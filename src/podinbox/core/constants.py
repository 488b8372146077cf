"""
podinbox Constants

All limits are explicit, named with units, big-endian naming convention.
Category comes first, specifics last: HTTP_TIMEOUT_SECS_DEFAULT not DEFAULT_TIMEOUT.
"""

# =============================================================================
# Wire Formats
# =============================================================================

CONTENT_TYPE_TURTLE: str = "text/turtle"
CONTENT_TYPE_SPARQL_UPDATE: str = "application/sparql-update"

# =============================================================================
# Inbox Layout
# =============================================================================

INBOX_MARKER_NAME: str = ".dummy"  # Placeholder that forces container creation
INBOX_ACL_NAME: str = ".acl"  # Access-control resource of the container
INBOX_RESERVED_NAMES: frozenset[str] = frozenset({INBOX_MARKER_NAME, INBOX_ACL_NAME})

# =============================================================================
# HTTP Limits
# =============================================================================

HTTP_TIMEOUT_SECS_DEFAULT: float = 30.0
HTTP_USER_AGENT_DEFAULT: str = "podinbox/0.1"

# =============================================================================
# Notification Limits
# =============================================================================

NOTIFICATION_CUSTOM_COUNT_MAX: int = 100  # Max custom triples per notification
