"""
ITSM Client Gateway

FastAPI front for the service client:
- Search with structured queries
- Create / upsert business objects with links
- Dependent validation lists

Session key and tenant id travel in headers (X-Session-Key, X-Tenant-Id)
and are forwarded untouched.
"""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .. import __version__
from ..config import ClientSettings
from ..errors import RemoteFault, RemoteTimeout, RemoteTransportError, ValidationError
from ..logger import configure_logging, get_logger
from ..models import Clause, DependentParam, FieldSpec, LinkEntry
from ..services import ServiceClient, build_command, build_query


logger = get_logger(__name__)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class SearchRequest(BaseModel):
    select: List[FieldSpec]
    from_object: str = Field(..., alias="from")
    where: List[Clause] = Field(default_factory=list)


class CommandRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    object_type: str
    field_values: Dict[str, Any] = Field(default_factory=dict, alias="fields")
    links: List[LinkEntry] = Field(default_factory=list)


class UpsertRequest(CommandRequest):
    match_keys: List[str]


class ValidationListRequest(BaseModel):
    offering_name: str
    param_name: str
    dependent_params: List[DependentParam] = Field(default_factory=list)
    filter_substring: str = ""


# =============================================================================
# DEPENDENCIES
# =============================================================================

@lru_cache
def get_settings() -> ClientSettings:
    return ClientSettings()


def get_service_client(request: Request) -> ServiceClient:
    """Shared client, opened at startup and closed at shutdown."""
    return request.app.state.service_client


class Identity(BaseModel):
    session_key: str
    tenant_id: str


def get_identity(
    x_session_key: str = Header(...),
    x_tenant_id: str = Header(...),
) -> Identity:
    return Identity(session_key=x_session_key, tenant_id=x_tenant_id)


# =============================================================================
# ERROR MAPPING
# =============================================================================

async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "validation", "detail": str(exc)},
    )


async def remote_fault_handler(request: Request, exc: RemoteFault):
    if isinstance(exc, RemoteTimeout):
        code = status.HTTP_504_GATEWAY_TIMEOUT
    else:
        code = status.HTTP_502_BAD_GATEWAY
    kind = "transport" if isinstance(exc, RemoteTransportError) else "remote"
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=code,
        content={"error": kind, "status": exc.status, "message": exc.message},
    )


# =============================================================================
# APP SETUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings or get_settings()
    app.state.service_client = ServiceClient(settings)
    logger.info("Gateway started against %s", settings.base_url)
    try:
        yield
    finally:
        app.state.service_client.close()


def create_app(settings: Optional[ClientSettings] = None) -> FastAPI:
    """
    Build the gateway app.

    No logging setup and no settings read happen here; settings are
    resolved at startup when none are given.
    """
    app = FastAPI(
        title="ITSM Client Gateway",
        description="REST front for the remote business-object API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RemoteFault, remote_fault_handler)

    # =========================================================================
    # HEALTH CHECK
    # =========================================================================

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "service": "itsm-client-gateway",
            "version": __version__,
        }

    # =========================================================================
    # SEARCH
    # =========================================================================

    @app.post("/search")
    def search(
        request: SearchRequest,
        identity: Identity = Depends(get_identity),
        client: ServiceClient = Depends(get_service_client),
    ):
        """
        Structured search.

        Response keeps the nested shape: objList[joined object][row].
        """
        query = build_query(request.select, request.from_object, request.where)
        result = client.search(identity.session_key, identity.tenant_id, query)
        return {"objList": result.to_wire()}

    # =========================================================================
    # OBJECT ENDPOINTS
    # =========================================================================

    @app.post("/objects", status_code=status.HTTP_201_CREATED)
    def create_object(
        request: CommandRequest,
        identity: Identity = Depends(get_identity),
        client: ServiceClient = Depends(get_service_client),
    ):
        """Create a business object and link it to existing records."""
        command = build_command(request.object_type, request.field_values, request.links)
        result = client.create_object(identity.session_key, identity.tenant_id, command)
        return result.to_wire()

    @app.post("/objects/upsert")
    def upsert_object(
        request: UpsertRequest,
        identity: Identity = Depends(get_identity),
        client: ServiceClient = Depends(get_service_client),
    ):
        """
        Insert or update by match keys.

        wasCreated is null when the remote service does not report it.
        """
        command = build_command(request.object_type, request.field_values, request.links)
        result = client.upsert_object(
            identity.session_key, identity.tenant_id, command, request.match_keys
        )
        return result.to_wire()

    # =========================================================================
    # VALIDATION LISTS
    # =========================================================================

    @app.post("/validation-lists")
    def fetch_validation_list(
        request: ValidationListRequest,
        identity: Identity = Depends(get_identity),
        client: ServiceClient = Depends(get_service_client),
    ):
        values = client.fetch_validation_list_data(
            identity.session_key,
            identity.tenant_id,
            request.offering_name,
            request.param_name,
            request.dependent_params,
            request.filter_substring,
        )
        return {"validationValuesList": [v.to_wire() for v in values]}

    return app


app = create_app()


# =============================================================================
# RUN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    configure_logging(get_settings().log_level)
    uvicorn.run(app, host="0.0.0.0", port=8000)
