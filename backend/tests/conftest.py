"""
Pytest configuration and shared fixtures.

In-memory fakes of the four collaborator interfaces. Loads can be held open
with an asyncio.Event to simulate slow responses.
"""
import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from helpdesk.domain.enums import ApprovalAction, TicketPriority, TicketStatus
from helpdesk.domain.errors import SchemaLoadError, TransportError
from helpdesk.domain.interfaces import (
    FieldDefinitionSource, MasterDataSource, TicketPersistence, UserProfileSource
)
from helpdesk.domain.models import (
    CatalogSelection, FieldDefinition, MasterDataOption, OrgUnit, Ticket,
    TicketSubmission, UserProfile
)


class FakeFieldSource(FieldDefinitionSource):
    def __init__(self, fields: Dict[str, List[FieldDefinition]]):
        self.fields = fields
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[str] = []

    async def get_fields(self, template_id: str) -> List[FieldDefinition]:
        self.calls.append(template_id)
        gate = self.gates.get(template_id)
        if gate is not None:
            await gate.wait()
        if template_id not in self.fields:
            raise SchemaLoadError(f"Unknown template {template_id}")
        return list(self.fields[template_id])


class FakeMasterData(MasterDataSource):
    def __init__(self, options: Optional[Dict[str, List[MasterDataOption]]] = None, fail: bool = False):
        self.options = options or {}
        self.fail = fail
        self.gate: Optional[asyncio.Event] = None

    async def get_options(self, field_name: str) -> List[MasterDataOption]:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise TransportError("master data down", status_code=503)
        return list(self.options.get(field_name, []))


class FakePersistence(TicketPersistence):
    def __init__(self):
        self.submissions: List[TicketSubmission] = []
        self.approvals: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None
        self.approval_gate: Optional[asyncio.Event] = None
        self.error: Optional[Exception] = None

    async def create_ticket(self, submission: TicketSubmission) -> str:
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        self.submissions.append(submission)
        return f"TKT-{len(self.submissions)}"

    async def submit_approval(self, ticket_id, action, comment=None) -> Ticket:
        if self.approval_gate is not None:
            await self.approval_gate.wait()
        if self.error is not None:
            raise self.error
        self.approvals.append((ticket_id, action, comment))
        status = TicketStatus.OPEN if action == ApprovalAction.APPROVE else TicketStatus.CLOSED
        return make_ticket(
            id=ticket_id, status=status, approval_decision=action, approval_comment=comment
        )


class FakeProfile(UserProfileSource):
    def __init__(self, user: Optional[UserProfile]):
        self.user = user
        self.gate: Optional[asyncio.Event] = None

    async def get_current_user(self) -> UserProfile:
        if self.gate is not None:
            await self.gate.wait()
        if self.user is None:
            raise TransportError("not signed in", status_code=401)
        return self.user


def make_field(name: str, label: str = "", field_type: str = "text", required: bool = False,
               sort_order: int = 0, options: Optional[List[str]] = None, id: Optional[str] = None) -> FieldDefinition:
    return FieldDefinition.model_validate({
        "id": id or f"fd-{name}",
        "name": name,
        "label": label or name.replace("_", " ").title(),
        "fieldType": field_type,
        "required": required,
        "sortOrder": sort_order,
        "options": options or [],
    })


def make_ticket(**overrides) -> Ticket:
    now = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    data = {
        "id": "TKT-1",
        "title": "ATM offline",
        "description": "ATM at the main branch is offline",
        "priority": TicketPriority.HIGH,
        "status": TicketStatus.PENDING_APPROVAL,
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return Ticket(**data)


@pytest.fixture
def incident_schema() -> List[FieldDefinition]:
    return [
        make_field("contact_phone", "Contact Phone", required=True, sort_order=2),
        make_field("unit_kerja", "Unit Kerja", "dropdown", required=True, sort_order=1,
                   options=["Kantor Pusat", "Cabang Utama", "Cabang Manado"]),
        make_field("affected_channels", "Affected Channels", "checkbox-multi", sort_order=3,
                   options=["ATM", "Mobile", "Teller"]),
        make_field("notes", "Notes", "textarea", sort_order=4),
    ]


@pytest.fixture
def field_source(incident_schema) -> FakeFieldSource:
    return FakeFieldSource({
        "tpl-incident": incident_schema,
        "tpl-access": [make_field("username", "Username", required=True)],
    })


@pytest.fixture
def persistence() -> FakePersistence:
    return FakePersistence()


@pytest.fixture
def branch_user() -> UserProfile:
    return UserProfile(
        id="42", username="budi", role="agent",
        department=OrgUnit(id="7", name="Kantor Cabang Utama")
    )


@pytest.fixture
def incident_selection() -> CatalogSelection:
    return CatalogSelection(
        template_id="tpl-incident",
        item_id="item-1",
        category_name="Hardware Support",
        service_name="ATM Repair",
        template_name="Incident"
    )


@pytest.fixture
def pending_ticket() -> Ticket:
    return make_ticket()
