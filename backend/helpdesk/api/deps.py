"""API Dependencies - Common dependencies for routes"""
from typing import Optional
from fastapi import Depends, Header, Request

from ..domain.interfaces import FieldDefinitionSource
from ..engine.field_validator import FieldValidator
from ..engine.schema_registry import FieldSchemaRegistry
from ..engine.ticket_workflow import TicketWorkflow
from ..services.helpdesk_api import HelpdeskApiClient
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing

    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


def get_api_client(request: Request) -> HelpdeskApiClient:
    """Shared helpdesk backend client, created on first use and closed on shutdown"""
    client = getattr(request.app.state, "helpdesk_client", None)
    if client is None:
        client = HelpdeskApiClient()
        request.app.state.helpdesk_client = client
    return client


def get_field_source(client: HelpdeskApiClient = Depends(get_api_client)) -> FieldDefinitionSource:
    return client


def get_schema_registry(
    source: FieldDefinitionSource = Depends(get_field_source)
) -> FieldSchemaRegistry:
    return FieldSchemaRegistry(source)


def get_validator() -> FieldValidator:
    return FieldValidator()


def get_workflow() -> TicketWorkflow:
    return TicketWorkflow()
