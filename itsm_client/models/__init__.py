"""
ITSM Client Models

Query / Command going out, Response / SearchResult coming back.
"""

from .business_object import (
    # Enums
    JoinType,
    LinkAction,

    # Outgoing
    WireModel,
    FieldValue,
    FieldSpec,
    Clause,
    Query,
    LinkEntry,
    Command,
)
from .text import to_text
from .response import (
    # Incoming
    Row,
    SearchResult,
    DependentParam,
    ValidationValue,
    CreateResult,
    UpsertResult,
    Response,
)

__all__ = [
    "JoinType", "LinkAction",
    "WireModel", "FieldValue", "FieldSpec", "Clause", "Query", "LinkEntry", "Command",
    "Row", "SearchResult", "DependentParam", "ValidationValue",
    "CreateResult", "UpsertResult", "Response",
    "to_text",
]
