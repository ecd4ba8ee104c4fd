"""
ITSM Query & Command Builders

Turn loose caller input (names, dicts, native scalars) into frozen
Query / Command models.

Everything is checked here, before a call is attempted:
- empty select list, empty object names -> ValidationError
- non-scalar field values -> ValidationError

Scalar conversion lives in models/text.py (shared with where clauses).
"""

from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

import pydantic

from ..errors import ValidationError
from ..models.business_object import (
    Clause,
    Command,
    FieldSpec,
    FieldValue,
    LinkAction,
    LinkEntry,
    Query,
)
from ..models.text import to_text


FieldSpecLike = Union[FieldSpec, str, Tuple[str, str], Mapping[str, Any]]
ClauseLike = Union[Clause, Mapping[str, Any]]
LinkLike = Union[LinkEntry, Mapping[str, Any]]


# =============================================================================
# HELPERS
# =============================================================================


def _require_text(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{what} must be a non-empty string")
    return value


def _errors_text(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts)


# =============================================================================
# QUERY
# =============================================================================

def _to_field_spec(spec: FieldSpecLike) -> FieldSpec:
    if isinstance(spec, FieldSpec):
        return spec
    if isinstance(spec, str):
        return FieldSpec(name=_require_text(spec, "Select field name"))
    if isinstance(spec, tuple) and len(spec) == 2:
        name, type_ = spec
        return FieldSpec(name=_require_text(name, "Select field name"), type=type_)
    if isinstance(spec, Mapping):
        return FieldSpec.model_validate(spec)
    raise ValidationError(f"Unsupported select field: {spec!r}")


def _to_clause(clause: ClauseLike) -> Clause:
    if isinstance(clause, Clause):
        return clause
    if isinstance(clause, Mapping):
        return Clause.model_validate(clause)
    raise ValidationError(f"Unsupported where clause: {clause!r}")


def build_query(
    select_fields: Sequence[FieldSpecLike],
    from_object: str,
    where: Optional[Iterable[ClauseLike]] = (),
) -> Query:
    """
    Build a search query.

    Args:
        select_fields: Field specs, (name, type) pairs or bare names
        from_object: Business object to search (e.g. "Incident")
        where: Clauses in evaluation order (None = no clauses)

    Clause order is kept exactly as given.
    """
    if isinstance(select_fields, (str, FieldSpec)) or not select_fields:
        raise ValidationError("Query needs at least one select field")
    _require_text(from_object, "Query object")

    try:
        return Query(
            select_fields=tuple(_to_field_spec(s) for s in select_fields),
            from_object=from_object,
            where=tuple(_to_clause(c) for c in (where or ())),
        )
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid query: {_errors_text(exc)}") from exc


# =============================================================================
# COMMAND
# =============================================================================

def link_to(
    related_object_type: str,
    related_object_id: str,
    relation: str = "",
) -> LinkEntry:
    """Link directive to an existing record."""
    return _link(LinkAction.LINK, related_object_type, related_object_id, relation)


def unlink_from(
    related_object_type: str,
    related_object_id: str,
    relation: str = "",
) -> LinkEntry:
    """Unlink directive from an existing record."""
    return _link(LinkAction.UNLINK, related_object_type, related_object_id, relation)


def _link(
    action: LinkAction,
    related_object_type: str,
    related_object_id: str,
    relation: str,
) -> LinkEntry:
    try:
        return LinkEntry(
            action=action,
            relation=relation or "",
            related_object_type=related_object_type,
            related_object_id=related_object_id,
        )
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid link: {_errors_text(exc)}") from exc


def _to_link(link: LinkLike) -> LinkEntry:
    if isinstance(link, LinkEntry):
        return link
    if isinstance(link, Mapping):
        return LinkEntry.model_validate(link)
    raise ValidationError(f"Unsupported link entry: {link!r}")


def _field_items(fields: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]]):
    if fields is None:
        return []
    if isinstance(fields, Mapping):
        return list(fields.items())
    return list(fields)


def build_command(
    object_type: str,
    fields: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]] = None,
    links: Optional[Iterable[LinkLike]] = (),
) -> Command:
    """
    Build a create/upsert command.

    Args:
        object_type: Remote type tag (e.g. "Change#", "Profile#Employee")
        fields: Mapping or (name, value) pairs; values are converted to text
        links: Link/Unlink directives, order kept

    Repeated names: last write wins, position of first write kept.
    """
    _require_text(object_type, "Object type")

    values = {}
    for name, raw in _field_items(fields):
        _require_text(name, "Field name")
        values[name] = to_text(raw)

    try:
        return Command(
            object_type=object_type,
            field_values=tuple(
                FieldValue(name=name, value=value) for name, value in values.items()
            ),
            links=tuple(_to_link(link) for link in (links or ())),
        )
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid command: {_errors_text(exc)}") from exc
