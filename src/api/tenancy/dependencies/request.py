"""Per-request inputs: the inbound request view and observation context."""

from typing import Annotated

from fastapi import Depends, Request
from ulid import ULID

from infrastructure.settings import TenancySettings, get_tenancy_settings
from shared_kernel.observability_context import ObservationContext
from tenancy.application.value_objects import InboundRequest

REQUEST_ID_HEADER = "X-Request-ID"


def get_inbound_request(
    request: Request,
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> InboundRequest:
    """Capture the headers and query parameter tenant resolution reads.

    The override is None only when the parameter is absent; an empty
    ``?tenant=`` still counts as present.
    """
    return InboundRequest(
        host=request.headers.get("host"),
        forwarded_host=request.headers.get("x-forwarded-host"),
        tenant_override=request.query_params.get(settings.override_param),
        route=request.url.path,
    )


def get_observation_context(request: Request) -> ObservationContext:
    """Build the observation context shared by every probe in a request."""
    return ObservationContext(
        request_id=request.headers.get(REQUEST_ID_HEADER) or str(ULID()),
        route=request.url.path,
        hostname=request.headers.get("host"),
    )
