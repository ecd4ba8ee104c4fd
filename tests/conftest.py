"""
Shared test fixtures.

Provides: a scripted fake of the remote service (httpx.MockTransport),
a ServiceClient wired to it, and sample Change / Employee records.
Dependencies: pytest, httpx
"""

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from itsm_client.config import ClientSettings
from itsm_client.services import ServiceClient

from tests.helpers import BASE_URL


class FakeRemote:
    """
    Scripted stand-in for the remote service.

    Each operation name maps to a JSON payload (or a callable taking the
    decoded request body). Every request is recorded for inspection.
    """

    def __init__(self):
        self.replies: Dict[str, Any] = {}
        self.requests: List[Dict[str, Any]] = []
        self.paths: List[str] = []
        self.http_status = 200
        self.error: Optional[Exception] = None

    def reply(self, operation: str, payload: Any) -> None:
        self.replies[operation] = payload

    @property
    def last_body(self) -> Dict[str, Any]:
        return self.requests[-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.error is not None:
            raise self.error
        operation = request.url.path.rsplit("/", 1)[-1]
        body = json.loads(request.content or b"{}")
        self.paths.append(request.url.path)
        self.requests.append(body)

        payload = self.replies.get(operation, {"status": "Success"})
        if callable(payload):
            payload = payload(body)
        if isinstance(payload, (bytes, str)):
            return httpx.Response(self.http_status, content=payload)
        return httpx.Response(self.http_status, json=payload)


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(base_url=BASE_URL)


@pytest.fixture
def service_client(remote, settings):
    http = httpx.Client(
        base_url=BASE_URL,
        transport=httpx.MockTransport(remote.handler),
    )
    client = ServiceClient(settings, http_client=http)
    yield client
    http.close()


@pytest.fixture
def change_fields() -> Dict[str, Any]:
    return {
        "RequestorLink": "FB884D18F7B746A0992880F2DFFE749C",
        "Subject": "Need to swap out the hard disk",
        "Description": "The hard drive just crashed - need to replace with a new drive from the vendor",
        "Status": "Logged",
        "TypeOfChange": "Major",
        "OwnerTeam": "Operations",
        "Owner": "Admin",
        "Impact": "Medium",
        "Urgency": "Medium",
        "CABVoteExpirationDateTime": "2013-03-26 18:38:30",
    }


@pytest.fixture
def employee_fields() -> Dict[str, Any]:
    return {
        "Status": "Active",
        "FirstName": "Brian",
        "LastName": "Wilson",
        "LoginID": "BWilson",
        "IsInternalAuth": True,
        "InternalAuthPasswd": "Manage1t",
        "PrimaryEmail": "BWilson@example.com",
        "Phone1": "14158665309",
        "ManagerLink": "FB884D18F7B746A0992880F2DFFE749C",
        "OrgUnitLink": "4A05123D660F408997A4FEE714DAD111",
        "Team": "IT",
        "Department": "Operations",
        "Title": "Administrator",
    }
