"""Helpdesk API Client - REST access to the helpdesk backend via httpx"""
from typing import Any, Dict, List, Optional
import httpx

from ..domain.enums import ApprovalAction
from ..domain.errors import SchemaLoadError, TransportError
from ..domain.interfaces import (
    FieldDefinitionSource, MasterDataSource, TicketPersistence, UserProfileSource
)
from ..domain.models import (
    ApprovalRequest, FieldDefinition, MasterDataOption, Ticket, TicketSubmission, UserProfile
)
from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _unwrap(payload: Any, *keys: str) -> Any:
    """
    Strip the backend's response envelope.

    Responses come either bare or as {"success": ..., "data": ...}; list
    payloads may additionally sit under one of `keys` (e.g. "fields").
    """
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if isinstance(payload, dict):
        for key in keys:
            if key in payload:
                return payload[key]
    return payload


def _server_message(response: httpx.Response) -> str:
    """Best-effort extraction of the server-provided error message"""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        if isinstance(body.get("message"), str) and body["message"]:
            return body["message"]
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict) and first.get("msg"):
                return str(first["msg"])
    return f"Request failed with status {response.status_code}"


def _parse_list(model: Any, items: Any, what: str) -> List[Any]:
    try:
        return [model.model_validate(item) for item in items]
    except ValueError as e:
        raise TransportError(f"Unexpected {what} payload from helpdesk backend", details={"reason": str(e)}) from e


def _parse_one(model: Any, item: Any, what: str) -> Any:
    try:
        return model.model_validate(item)
    except ValueError as e:
        raise TransportError(f"Unexpected {what} payload from helpdesk backend", details={"reason": str(e)}) from e


class HelpdeskApiClient(FieldDefinitionSource, MasterDataSource, TicketPersistence, UserProfileSource):
    """
    Async client for the helpdesk backend.

    Implements every collaborator interface the engine depends on. Non-2xx
    responses surface as TransportError carrying the server message; field
    schema failures surface as SchemaLoadError. Nothing is retried.
    """

    FIELDS_PATH = "/service-catalog/templates/{template_id}/fields"
    MASTER_DATA_PATH = "/master-data/{field_name}"
    TICKETS_PATH = "/tickets"
    APPROVAL_PATH = "/tickets/{ticket_id}/approval"
    CURRENT_USER_PATH = "/auth/me"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self._owns_client = client is None
        if client is None:
            headers = {"Content-Type": "application/json"}
            bearer = token if token is not None else settings.helpdesk_api_token
            if bearer:
                headers["Authorization"] = f"Bearer {bearer}"
            client = httpx.AsyncClient(
                base_url=base_url or settings.helpdesk_api_base_url,
                headers=headers,
                timeout=timeout or settings.request_timeout_seconds
            )
        self._client = client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HelpdeskApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Helpdesk API {method} {path} failed: {e}")
            raise TransportError(f"Could not reach helpdesk backend: {e}") from e

        if response.is_error:
            message = _server_message(response)
            logger.warning(
                f"Helpdesk API {method} {path} returned {response.status_code}: {message}",
                extra={"status": response.status_code}
            )
            raise TransportError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "Helpdesk backend returned an invalid JSON body",
                status_code=response.status_code
            ) from e

    # =========================================================================
    # Field Definition Source
    # =========================================================================

    async def get_fields(self, template_id: str) -> List[FieldDefinition]:
        path = self.FIELDS_PATH.format(template_id=template_id)
        try:
            payload = await self._request("GET", path)
        except TransportError as e:
            if e.status_code == 404:
                raise SchemaLoadError(
                    f"Unknown template {template_id}",
                    details={"template_id": template_id}
                ) from e
            raise SchemaLoadError(
                f"Could not load fields for template {template_id}: {e.message}",
                details={"template_id": template_id, **e.details}
            ) from e

        raw_fields = _unwrap(payload, "fields", "customFieldDefinitions") or []
        if not isinstance(raw_fields, list):
            raise SchemaLoadError(
                f"Unexpected field payload for template {template_id}",
                details={"template_id": template_id}
            )
        try:
            return [FieldDefinition.model_validate(item) for item in raw_fields]
        except ValueError as e:
            raise SchemaLoadError(
                f"Invalid field definition for template {template_id}",
                details={"template_id": template_id, "reason": str(e)}
            ) from e

    # =========================================================================
    # Master Data Source
    # =========================================================================

    async def get_options(self, field_name: str) -> List[MasterDataOption]:
        payload = await self._request("GET", self.MASTER_DATA_PATH.format(field_name=field_name))
        raw_options = _unwrap(payload, "options", "items") or []
        return _parse_list(MasterDataOption, raw_options, "master data")

    # =========================================================================
    # Ticket Persistence
    # =========================================================================

    async def create_ticket(self, submission: TicketSubmission) -> str:
        payload = await self._request("POST", self.TICKETS_PATH, json=submission.to_payload())
        body = _unwrap(payload)
        ticket_id = None
        if isinstance(body, dict):
            ticket_id = body.get("ticketId") or body.get("id")
        if ticket_id is None:
            raise TransportError("Helpdesk backend did not return a ticket id")
        logger.info(
            f"Ticket {ticket_id} created",
            extra={"ticket_id": str(ticket_id), "template_id": submission.template_id}
        )
        return str(ticket_id)

    async def submit_approval(
        self,
        ticket_id: str,
        action: ApprovalAction,
        comment: Optional[str] = None
    ) -> Ticket:
        request = ApprovalRequest(ticket_id=ticket_id, action=action, comment=comment)
        body: Dict[str, Any] = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload = await self._request(
            "PUT",
            self.APPROVAL_PATH.format(ticket_id=ticket_id),
            json=body
        )
        return _parse_one(Ticket, _unwrap(payload, "ticket"), "ticket")

    # =========================================================================
    # User Profile Source
    # =========================================================================

    async def get_current_user(self) -> UserProfile:
        payload = await self._request("GET", self.CURRENT_USER_PATH)
        return _parse_one(UserProfile, _unwrap(payload, "user"), "user profile")
