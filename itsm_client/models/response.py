"""
ITSM Response Models

What comes BACK from the service:
- Row = one business object (RecID + FieldValues)
- SearchResult = rows per joined object, two levels, never flattened
- ValidationValue = one picklist entry (stored vs display)
- Response = the raw envelope every call returns (status first)
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import Field, RootModel, ConfigDict, field_validator

from .business_object import WireModel, FieldValue


# =============================================================================
# SEARCH ROWS
# =============================================================================

class Row(WireModel):
    """One matched business object."""
    rec_id: str = Field(..., alias="RecID")
    field_values: Tuple[FieldValue, ...] = Field(default=(), alias="FieldValues")
    object_type: Optional[str] = Field(default=None, alias="BusinessObjectName")

    @field_validator("field_values", mode="before")
    @classmethod
    def _null_is_empty(cls, v):
        return () if v is None else v

    def __getitem__(self, index: int) -> FieldValue:
        return self.field_values[index]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Field value by name (first match)."""
        for fv in self.field_values:
            if fv.name == name:
                return fv.value
        return default


class SearchResult(RootModel[Tuple[Tuple[Row, ...], ...]]):
    """
    Nested search result.

    Outer index = joined object, inner index = matching row of that
    object. A single-object query that matched one record is
    `result[0][0]`. Zero matches is an empty sequence, never None.
    """

    model_config = ConfigDict(frozen=True)

    root: Tuple[Tuple[Row, ...], ...] = ()

    @field_validator("root", mode="before")
    @classmethod
    def _null_lists_are_empty(cls, v):
        if v is None:
            return ()
        if isinstance(v, (list, tuple)):
            return tuple(() if inner is None else inner for inner in v)
        return v

    def __getitem__(self, index: int) -> Tuple[Row, ...]:
        return self.root[index]

    def __iter__(self) -> Iterator[Tuple[Row, ...]]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    @property
    def is_empty(self) -> bool:
        return not any(self.root)

    def rows(self) -> Iterator[Row]:
        """All rows, outer list first, left to right."""
        for group in self.root:
            yield from group

    def first(self) -> Optional[Row]:
        return next(self.rows(), None)

    def to_wire(self) -> List[List[Dict[str, Any]]]:
        return [[row.to_wire() for row in group] for group in self.root]


# =============================================================================
# VALIDATION LISTS
# =============================================================================

class DependentParam(WireModel):
    """Currently chosen value of a parameter that constrains another."""
    name: str = Field(..., alias="strParName", min_length=1)
    value: str = Field(default="", alias="strParValue")


class ValidationValue(WireModel):
    """One allowed picklist entry."""
    stored_value: str = Field(default="", alias="strStoredValue")
    display_value: str = Field(default="", alias="strDisplayValue")

    @field_validator("stored_value", "display_value", mode="before")
    @classmethod
    def _null_is_empty(cls, v):
        return "" if v is None else v


# =============================================================================
# CALL RESULTS
# =============================================================================

class CreateResult(WireModel):
    rec_id: str = Field(..., alias="recId", min_length=1)


class UpsertResult(WireModel):
    """
    Outcome of an upsert.

    was_created:
    - True: a new record was inserted
    - False: an existing record matched the keys and was updated
    - None: the service did not say
    """
    rec_id: str = Field(..., alias="recId", min_length=1)
    was_created: Optional[bool] = Field(default=None, alias="wasCreated")


class Response(WireModel):
    """
    Common response envelope.

    `status` is the only success discriminator; everything else is
    optional and depends on the operation.
    """
    status: str
    exception_reason: Optional[str] = Field(default=None, alias="exceptionReason")
    rec_id: Optional[str] = Field(default=None, alias="recId")
    obj_list: SearchResult = Field(default_factory=SearchResult, alias="objList")
    validation_values: Tuple[ValidationValue, ...] = Field(
        default=(), alias="validationValuesList"
    )
    was_created: Optional[bool] = Field(default=None, alias="wasCreated")

    @field_validator("obj_list", mode="before")
    @classmethod
    def _null_obj_list(cls, v):
        return () if v is None else v

    @field_validator("validation_values", mode="before")
    @classmethod
    def _null_values(cls, v):
        return () if v is None else v
