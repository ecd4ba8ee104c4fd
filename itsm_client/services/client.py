"""
ITSM Service Client

One method per remote capability:
    Search                              -> search()
    CreateObject                        -> create_object()
    UpsertObject                        -> upsert_object()
    FetchServiceReqValidationListData   -> fetch_validation_list_data()

Every call = one POST of a JSON body to {base_url}/{Operation}.
No retries. No cached session. Local input is checked BEFORE the
request goes out; anything the remote rejects comes back as RemoteFault.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import httpx
import pydantic

from ..config import ClientSettings
from ..errors import (
    MalformedResponse,
    RemoteTimeout,
    RemoteTransportError,
    ValidationError,
)
from ..logger import get_logger
from ..models.business_object import Clause, Command, FieldSpec, Query
from ..models.response import (
    CreateResult,
    DependentParam,
    Response,
    SearchResult,
    UpsertResult,
    ValidationValue,
)
from .parser import ResponseParser


logger = get_logger(__name__)

DependentParamLike = Union[DependentParam, Mapping[str, Any]]


class ServiceClient:
    """
    Thin call surface over the remote business-object API.

    The client keeps only an HTTP connection pool. Session key and tenant
    id are passed on every call and never stored, so one client can be
    shared by independent callers.

    Usage:
        with ServiceClient(ClientSettings()) as svc:
            rec_id = svc.create_object(session, tenant, command).rec_id
    """

    SEARCH = "Search"
    CREATE_OBJECT = "CreateObject"
    UPSERT_OBJECT = "UpsertObject"
    FETCH_VALIDATION_LIST = "FetchServiceReqValidationListData"

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        http_client: Optional[httpx.Client] = None,
        parser: Optional[ResponseParser] = None,
    ):
        self.settings = settings or ClientSettings()
        self.parser = parser or ResponseParser(self.settings.success_status)
        self._owns_http = http_client is None
        self.http = http_client or httpx.Client(
            base_url=self.settings.base_url,
            timeout=httpx.Timeout(self.settings.timeout_seconds),
            verify=self.settings.verify_tls,
            headers={
                "User-Agent": self.settings.user_agent,
                "Accept": "application/json",
            },
        )

    def close(self) -> None:
        """Close the HTTP pool, unless it was handed in by the caller."""
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "ServiceClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # =========================================================================
    # Operations
    # =========================================================================

    def search(self, session_key: str, tenant_id: str, query: Query) -> SearchResult:
        """
        Run a structured search.

        Returns the two-level result exactly as the service nests it
        (outer = joined object, inner = rows). No match = empty result.
        """
        self._check_identity(session_key, tenant_id)
        if not isinstance(query, Query):
            raise ValidationError("search() expects a Query (see build_query)")

        logger.debug("Search on %s (%d clause(s))", query.from_object, len(query.where))
        response = self._call(self.SEARCH, session_key, tenant_id, {
            "query": query.to_wire(),
        })
        return response.obj_list

    def create_object(
        self,
        session_key: str,
        tenant_id: str,
        command: Command,
    ) -> CreateResult:
        """
        Create a business object (and its links).

        Returns the new RecId. A success without an id is treated as a
        malformed response, never as a partial result.
        """
        self._check_identity(session_key, tenant_id)
        self._check_command(command)

        logger.debug("CreateObject %s (%d field(s), %d link(s))",
                     command.object_type, len(command.field_values), len(command.links))
        response = self._call(self.CREATE_OBJECT, session_key, tenant_id, {
            "data": command.to_wire(),
        })
        return CreateResult(rec_id=self._require_rec_id(response))

    def upsert_object(
        self,
        session_key: str,
        tenant_id: str,
        command: Command,
        match_keys: Sequence[str],
    ) -> UpsertResult:
        """
        Insert or update a business object.

        The service decides match-vs-insert from `match_keys` (e.g.
        ["LoginID"]). `was_created` mirrors the service's `wasCreated`
        flag and stays None when the service does not send one.
        """
        self._check_identity(session_key, tenant_id)
        self._check_command(command)
        keys = self._check_match_keys(match_keys)

        logger.debug("UpsertObject %s matching on %s", command.object_type, keys)
        response = self._call(self.UPSERT_OBJECT, session_key, tenant_id, {
            "data": command.to_wire(),
            "searchFields": keys,
        })
        return UpsertResult(
            rec_id=self._require_rec_id(response),
            was_created=response.was_created,
        )

    def fetch_validation_list_data(
        self,
        session_key: str,
        tenant_id: str,
        offering_name: str,
        param_name: str,
        dependent_params: Iterable[DependentParamLike] = (),
        filter_substring: str = "",
    ) -> List[ValidationValue]:
        """
        Dependent picklist lookup for a request offering parameter.

        Args:
            offering_name: Request offering (e.g. "Domain Password Reset")
            param_name: Parameter whose values are wanted (e.g. "Requester")
            dependent_params: Current values of the parameters that
                constrain `param_name`, in order
            filter_substring: Only values containing this text
        """
        self._check_identity(session_key, tenant_id)
        self._require(offering_name, "Offering name")
        self._require(param_name, "Parameter name")
        params = [self._to_dependent_param(p) for p in dependent_params]

        logger.debug("Validation list %s/%s (%d dependent param(s))",
                     offering_name, param_name, len(params))
        response = self._call(self.FETCH_VALIDATION_LIST, session_key, tenant_id, {
            "offeringName": offering_name,
            "paramName": param_name,
            "depValItems": [p.to_wire() for p in params],
            "subStrQuery": filter_substring or "",
        })
        return list(response.validation_values)

    def find_rec_id(
        self,
        session_key: str,
        tenant_id: str,
        object_type: str,
        field: str,
        value: str,
    ) -> Optional[str]:
        """
        RecId of the first record where `field` equals `value`.

        Handy for resolving link targets before a create, e.g. the CI
        named "APAC-DEPOT-SERV01". Returns None when nothing matches.
        """
        self._require(object_type, "Object type")
        self._require(field, "Field name")
        query = Query(
            select_fields=(FieldSpec(name="RecId"),),
            from_object=object_type,
            where=(Clause(field=field, value=value),),
        )
        row = self.search(session_key, tenant_id, query).first()
        return row.rec_id if row else None

    # =========================================================================
    # Private helpers
    # =========================================================================

    def _call(
        self,
        operation: str,
        session_key: str,
        tenant_id: str,
        payload: Dict[str, Any],
    ) -> Response:
        body = {"sessionKey": session_key, "tenantId": tenant_id}
        body.update(payload)

        try:
            reply = self.http.post(f"/{operation}", json=body)
        except httpx.TimeoutException as exc:
            logger.warning("%s timed out: %s", operation, exc)
            raise RemoteTimeout(str(exc) or operation) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s transport error: %s", operation, exc)
            raise RemoteTransportError("TransportError", str(exc)) from exc

        if reply.is_error:
            logger.warning("%s returned HTTP %d", operation, reply.status_code)
            raise RemoteTransportError(f"HTTP {reply.status_code}", reply.text or None)

        try:
            raw = reply.json()
        except ValueError as exc:
            raise MalformedResponse(f"{operation} did not return JSON") from exc

        return self.parser.parse(raw)

    @staticmethod
    def _require(value: Any, what: str) -> None:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{what} must be a non-empty string")

    def _check_identity(self, session_key: str, tenant_id: str) -> None:
        self._require(session_key, "Session key")
        self._require(tenant_id, "Tenant id")

    @staticmethod
    def _check_command(command: Command) -> None:
        if not isinstance(command, Command):
            raise ValidationError("Expected a Command (see build_command)")

    def _check_match_keys(self, match_keys: Sequence[str]) -> List[str]:
        if isinstance(match_keys, str) or not match_keys:
            raise ValidationError("Upsert needs at least one match key")
        keys = list(match_keys)
        for key in keys:
            self._require(key, "Match key")
        return keys

    @staticmethod
    def _to_dependent_param(param: DependentParamLike) -> DependentParam:
        if isinstance(param, DependentParam):
            return param
        try:
            return DependentParam.model_validate(param)
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid dependent parameter: {param!r}") from exc

    @staticmethod
    def _require_rec_id(response: Response) -> str:
        if not response.rec_id:
            raise MalformedResponse(
                "Success response carries no recId", status=response.status
            )
        return response.rec_id
