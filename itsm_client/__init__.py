"""
ITSM Business-Object Client

Typed access to a remote ITSM web service:
- Query builder (select / from / where)
- Object commands with links to existing records
- Search, create, upsert and dependent validation lists
- Optional FastAPI gateway
"""

__version__ = "0.1.0"

from .errors import (
    ItsmClientError,
    ValidationError,
    RemoteFault,
    RemoteTransportError,
    RemoteTimeout,
    MalformedResponse,
)
from .models import (
    FieldValue,
    FieldSpec,
    Clause,
    Query,
    LinkAction,
    LinkEntry,
    Command,
    Row,
    SearchResult,
    DependentParam,
    ValidationValue,
    CreateResult,
    UpsertResult,
)
from .services import (
    build_query,
    build_command,
    link_to,
    unlink_from,
    to_text,
    ResponseParser,
    ServiceClient,
)

__all__ = [
    "ItsmClientError", "ValidationError", "RemoteFault",
    "RemoteTransportError", "RemoteTimeout", "MalformedResponse",
    "FieldValue", "FieldSpec", "Clause", "Query", "LinkAction", "LinkEntry",
    "Command", "Row", "SearchResult", "DependentParam", "ValidationValue",
    "CreateResult", "UpsertResult",
    "build_query", "build_command", "link_to", "unlink_from", "to_text",
    "ResponseParser", "ServiceClient",
]
