"""
Query and command builder tests.

Covers: text conversion of field values, last-write-wins, clause order,
link fan-out, fail-fast validation.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum

import pytest

from itsm_client import ValidationError
from itsm_client.models import Clause, Command, FieldSpec, JoinType, LinkAction, LinkEntry, Query
from itsm_client.services import build_command, build_query, link_to, to_text, unlink_from


# =============================================================================
# to_text
# =============================================================================

class Impact(str, Enum):
    MEDIUM = "Medium"


@pytest.mark.parametrize("value, expected", [
    (True, "true"),
    (False, "false"),
    (42, "42"),
    (-7, "-7"),
    (0.1, "0.1"),
    (1.0, "1.0"),
    (1e-7, "0.0000001"),
    (1e20, "100000000000000000000"),
    (Decimal("12.50"), "12.50"),
    ("2013-03-26 18:38:30", "2013-03-26 18:38:30"),
    (date(2013, 3, 26), "2013-03-26"),
    (datetime(2013, 3, 26, 18, 38, 30), "2013-03-26 18:38:30"),
    (Impact.MEDIUM, "Medium"),
    (None, ""),
])
def test_to_text(value, expected):
    assert to_text(value) == expected


def test_to_text_keeps_timezone_offset():
    tz = timezone(timedelta(hours=2))
    assert to_text(datetime(2013, 3, 26, 18, 38, 30, tzinfo=tz)) == "2013-03-26 18:38:30+02:00"


@pytest.mark.parametrize("value", [[1], {"a": 1}, {1}, (1, 2), b"raw", float("nan")])
def test_to_text_rejects_non_scalars(value):
    with pytest.raises(ValidationError):
        to_text(value)


# =============================================================================
# build_query
# =============================================================================

def test_incident_query_keeps_clause_order():
    query = build_query(
        ["IncidentNumber"],
        "Incident",
        [
            {"condition": "=", "field": "Priority", "value": "1"},
            {"join": "AND", "condition": "=", "field": "Status", "value": "Active"},
        ],
    )

    assert query.from_object == "Incident"
    assert query.select_fields == (FieldSpec(name="IncidentNumber", type="Text"),)
    assert len(query.where) == 2
    assert [c.field for c in query.where] == ["Priority", "Status"]
    assert query.where[0].join is None
    assert query.where[1].join == JoinType.AND


def test_query_order_preserved_for_many_clauses():
    fields = [f"F{i}" for i in range(25)]
    clauses = [Clause(join="OR" if i % 2 else "AND", field=f, value=str(i))
               for i, f in enumerate(fields)]

    query = build_query([("RecId", "Text")], "CI.Computer", clauses)

    assert [c.field for c in query.where] == fields
    assert list(query.where) == clauses


def test_query_wire_shape():
    query = build_query(
        [FieldSpec(name="RecId")],
        "CI.Computer",
        [Clause(condition="=", field="Name", value="APAC-DEPOT-SERV01")],
    )

    assert query.to_wire() == {
        "Select": {"Fields": [{"Name": "RecId", "Type": "Text"}]},
        "From": {"Object": "CI.Computer"},
        "Where": [{"Condition": "=", "Field": "Name", "Value": "APAC-DEPOT-SERV01"}],
    }
    assert Query.model_validate(query.to_wire()) == query


def test_join_is_normalized():
    clause = Clause(join="or", field="Status", value="Active")
    assert clause.join == JoinType.OR
    assert Clause(join="", field="Status").join is None


@pytest.mark.parametrize("select, obj", [
    ([], "Incident"),
    ("IncidentNumber", "Incident"),
    ([""], "Incident"),
    (["IncidentNumber"], ""),
    (["IncidentNumber"], "   "),
])
def test_query_validation(select, obj):
    with pytest.raises(ValidationError):
        build_query(select, obj)


def test_query_rejects_bad_clause():
    with pytest.raises(ValidationError):
        build_query(["IncidentNumber"], "Incident", [{"condition": "="}])


def test_clause_values_use_field_text_rules():
    query = build_query(["RecId"], "Profile#Employee", [
        {"field": "IsInternalAuth", "value": True},
        {"join": "AND", "field": "Ratio", "value": 1e-7},
        {"join": "AND", "field": "Impact", "value": Impact.MEDIUM},
    ])

    assert [c.value for c in query.where] == ["true", "0.0000001", "Medium"]
    assert query.to_wire()["Where"][1]["Value"] == "0.0000001"


def test_clause_rejects_container_value():
    with pytest.raises(ValidationError):
        build_query(["RecId"], "Incident", [{"field": "Status", "value": ["Active"]}])


def test_query_where_none_means_no_clauses():
    query = build_query(["IncidentNumber"], "Incident", None)
    assert query.where == ()
    assert query.to_wire()["Where"] == []


def test_query_is_frozen():
    query = build_query(["IncidentNumber"], "Incident")
    with pytest.raises(Exception):
        query.from_object = "Change"


# =============================================================================
# build_command
# =============================================================================

def test_change_command_round_trips_through_wire_form():
    command = build_command(
        "Change#",
        {"Subject": "Need to swap out the hard disk", "Status": "Logged"},
        [{"action": "Link", "relation": "", "related_object_type": "CI#",
          "related_object_id": "ABC123"}],
    )

    wire = command.to_wire()
    assert wire == {
        "ObjectType": "Change#",
        "Fields": [
            {"Name": "Subject", "Value": "Need to swap out the hard disk"},
            {"Name": "Status", "Value": "Logged"},
        ],
        "LinkToExistent": [{
            "Action": "Link",
            "Relation": "",
            "RelatedObjectType": "CI#",
            "RelatedObjectId": "ABC123",
        }],
    }

    parsed = Command.model_validate(wire)
    assert parsed == command
    assert parsed.field_map == {"Subject": "Need to swap out the hard disk", "Status": "Logged"}
    assert parsed.links == (LinkEntry(
        action=LinkAction.LINK, relation="", related_object_type="CI#",
        related_object_id="ABC123",
    ),)


def test_all_change_fields_are_kept(change_fields):
    command = build_command("Change#", change_fields)

    assert len(command.field_values) == len(change_fields)
    assert [fv.name for fv in command.field_values] == list(change_fields)
    assert command.get("CABVoteExpirationDateTime") == "2013-03-26 18:38:30"


def test_native_values_become_text(employee_fields):
    command = build_command("Profile#Employee", employee_fields)

    assert command.get("IsInternalAuth") == "true"
    assert all(isinstance(fv.value, str) for fv in command.field_values)


def test_duplicate_names_last_write_wins():
    command = build_command("Incident", [
        ("Status", "Logged"),
        ("Subject", "Printer jam"),
        ("Status", "Active"),
    ])

    assert len(command.field_values) == 2
    assert command.field_map == {"Status": "Active", "Subject": "Printer jam"}
    assert command.field_values[0].name == "Status"


def test_command_model_rejects_duplicate_names():
    with pytest.raises(Exception):
        Command(object_type="Incident", field_values=[
            {"name": "Status", "value": "a"},
            {"name": "Status", "value": "b"},
        ])


def test_link_fan_out_on_one_relation():
    links = [
        link_to("Frs_def_role#", "0a4724d8478b451abea3fb44d33db1b6"),
        link_to("Frs_def_role#", "06d780f5d7d34119be0d1bc8fc997947"),
        link_to("StandardUserTeam#", "10F60157A4F34A4F9DDB140E2328C7A6", relation="Rev2"),
        link_to("StandardUserTeam#", "1FF47B9EDA3049CC92458CE3249BA349", relation="Rev2"),
    ]

    command = build_command("Profile#Employee", {"LoginID": "BWilson"}, links)

    assert command.links == tuple(links)
    assert [l.relation for l in command.links] == ["", "", "Rev2", "Rev2"]


def test_unlink_entry():
    entry = unlink_from("CI#", "ABC123", relation="Rev1")
    assert entry.action == LinkAction.UNLINK
    assert entry.to_wire()["Action"] == "Unlink"


@pytest.mark.parametrize("kwargs", [
    {"related_object_type": "", "related_object_id": "ABC123"},
    {"related_object_type": "CI#", "related_object_id": ""},
])
def test_link_validation(kwargs):
    with pytest.raises(ValidationError):
        link_to(**kwargs)


def test_command_rejects_unknown_link_action():
    with pytest.raises(ValidationError):
        build_command("Change#", {}, [{"action": "Merge", "related_object_type": "CI#",
                                       "related_object_id": "ABC123"}])


@pytest.mark.parametrize("object_type", ["", "  ", None])
def test_command_requires_object_type(object_type):
    with pytest.raises(ValidationError):
        build_command(object_type, {"Subject": "x"})


def test_command_requires_field_names():
    with pytest.raises(ValidationError):
        build_command("Incident", {"": "x"})


def test_command_rejects_container_values():
    with pytest.raises(ValidationError):
        build_command("Incident", {"Tags": ["a", "b"]})


def test_command_without_fields_or_links():
    command = build_command("Incident")
    assert command.field_values == ()
    assert command.links == ()


def test_command_links_none_means_no_links():
    assert build_command("Incident", {"Status": "Active"}, links=None).links == ()
