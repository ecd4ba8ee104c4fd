"""
ITSM Business-Object Models

What goes ON the wire:
1. FieldValue = one named text value (Name / Value)
2. Query = Select + From + ordered Where clauses
3. Command = ObjectType + Fields + LinkToExistent
4. LinkEntry = Link/Unlink an existing record by type and RecId

Python attributes are snake_case, wire names are aliases.
All models are frozen once built.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .text import to_text


# =============================================================================
# ENUMS
# =============================================================================

class JoinType(str, Enum):
    AND = "AND"
    OR = "OR"


class LinkAction(str, Enum):
    LINK = "Link"
    UNLINK = "Unlink"


# =============================================================================
# BASE
# =============================================================================

class WireModel(BaseModel):
    """Frozen model that accepts both attribute and wire names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# FIELD VALUES
# =============================================================================

class FieldValue(WireModel):
    """A single named value. Always text on the wire."""
    name: str = Field(..., alias="Name", min_length=1)
    value: str = Field(default="", alias="Value")

    @field_validator("value", mode="before")
    @classmethod
    def _null_is_empty(cls, v):
        # Remote rows carry null for unset fields
        return "" if v is None else v


# =============================================================================
# QUERY
# =============================================================================

class FieldSpec(WireModel):
    """One selected field. Type defaults to Text like the service does."""
    name: str = Field(..., alias="Name", min_length=1)
    type: str = Field(default="Text", alias="Type")


class Clause(WireModel):
    """
    One where-rule.

    Clauses are evaluated left to right; the join of the first clause
    is ignored by the remote service.
    """
    join: Optional[JoinType] = Field(default=None, alias="Join")
    condition: str = Field(default="=", alias="Condition", min_length=1)
    field: str = Field(..., alias="Field", min_length=1)
    value: str = Field(default="", alias="Value")

    @field_validator("join", mode="before")
    @classmethod
    def _normalize_join(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v

    @field_validator("value", mode="before")
    @classmethod
    def _value_as_text(cls, v):
        # Same text rules as field values
        return to_text(v)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Query(WireModel):
    """
    Structured select/from/where over one business-object type.

    Wire shape:
        {"Select": {"Fields": [...]}, "From": {"Object": ...}, "Where": [...]}
    """
    select_fields: Tuple[FieldSpec, ...] = Field(..., min_length=1)
    from_object: str = Field(..., min_length=1)
    where: Tuple[Clause, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _unpack_wire_shape(cls, data):
        if isinstance(data, dict) and "Select" in data:
            return {
                "select_fields": (data.get("Select") or {}).get("Fields") or (),
                "from_object": (data.get("From") or {}).get("Object") or "",
                "where": data.get("Where") or (),
            }
        return data

    def to_wire(self) -> Dict[str, Any]:
        return {
            "Select": {"Fields": [f.to_wire() for f in self.select_fields]},
            "From": {"Object": self.from_object},
            "Where": [c.to_wire() for c in self.where],
        }


# =============================================================================
# COMMANDS
# =============================================================================

class LinkEntry(WireModel):
    """
    Relationship directive toward an already-existing record.

    Empty relation = the default (or only) relationship between the
    two object types.
    """
    action: LinkAction = Field(default=LinkAction.LINK, alias="Action")
    relation: str = Field(default="", alias="Relation")
    related_object_type: str = Field(..., alias="RelatedObjectType", min_length=1)
    related_object_id: str = Field(..., alias="RelatedObjectId", min_length=1)

    @field_validator("relation", mode="before")
    @classmethod
    def _null_relation(cls, v):
        return "" if v is None else v


class Command(WireModel):
    """
    Create/upsert payload.

    Field names are unique. Links keep their order; the same relation
    may appear several times with different targets.
    """
    object_type: str = Field(..., alias="ObjectType", min_length=1)
    field_values: Tuple[FieldValue, ...] = Field(default=(), alias="Fields")
    links: Tuple[LinkEntry, ...] = Field(default=(), alias="LinkToExistent")

    @field_validator("object_type")
    @classmethod
    def _object_type_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("object type must not be blank")
        return v

    @field_validator("field_values", "links", mode="before")
    @classmethod
    def _null_is_empty(cls, v):
        return () if v is None else v

    @model_validator(mode="after")
    def _unique_field_names(self) -> "Command":
        seen = set()
        for fv in self.field_values:
            if fv.name in seen:
                raise ValueError(f"duplicate field name: {fv.name}")
            seen.add(fv.name)
        return self

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for fv in self.field_values:
            if fv.name == name:
                return fv.value
        return default

    @property
    def field_map(self) -> Dict[str, str]:
        return {fv.name: fv.value for fv in self.field_values}
