"""
Shared test constants and wire-shaped sample data.
"""

from typing import Any, Dict


BASE_URL = "http://itsm.test/ServiceAPI"
SESSION_KEY = "session-key-123"
TENANT_ID = "tenant.example.com"


def row(rec_id: str, **fields: str) -> Dict[str, Any]:
    """Wire-shaped search row."""
    return {
        "RecID": rec_id,
        "FieldValues": [{"Name": k, "Value": v} for k, v in fields.items()],
    }
