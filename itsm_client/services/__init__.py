"""
ITSM Client Services

Builders (local, fail fast) -> ServiceClient (one round trip) -> ResponseParser.
"""

from .builders import build_query, build_command, link_to, unlink_from, to_text
from .parser import ResponseParser
from .client import ServiceClient

__all__ = [
    # Building
    "build_query", "build_command", "link_to", "unlink_from", "to_text",

    # Calling
    "ResponseParser", "ServiceClient",
]
