"""Unit tests for schema loading, field validation and ticket assembly."""
from datetime import datetime, timezone

import pytest

from helpdesk.domain.enums import FieldType, TicketPriority, TicketStatus, RootCause, IssueCategory
from helpdesk.domain.errors import SchemaLoadError, TransportError, ValidationError
from helpdesk.domain.models import (
    CatalogSelection, ClassificationSuggestion, FieldDefinition, Ticket, TicketDraft, UserProfile
)
from helpdesk.engine.field_validator import FieldValidator
from helpdesk.engine.schema_registry import FieldSchemaRegistry
from helpdesk.engine.ticket_assembler import TicketAssembler
from tests.conftest import FakeFieldSource, make_field


class TestFieldDefinitionParsing:

    def test_camel_case_payload(self):
        field = FieldDefinition.model_validate({
            "id": 12,
            "fieldName": "branch",
            "fieldLabel": "Branch",
            "fieldType": "select",
            "isRequired": True,
            "options": ["A", {"value": "B", "label": "Bravo"}],
            "sortOrder": 3,
        })
        assert field.id == "12"
        assert field.field_type == FieldType.DROPDOWN
        assert field.required is True
        assert [o.value for o in field.options] == ["A", "B"]
        assert field.options[0].label == "A"

    def test_unknown_type_is_text(self):
        assert make_field("x", field_type="signature").field_type == FieldType.TEXT

    def test_legacy_ticket_timestamps_are_utc(self):
        ticket = Ticket.model_validate({
            "id": 7,
            "title": "ATM offline",
            "createdAt": "2026-03-01 09:00:00",
            "updatedAt": "2026-03-01T16:00:00+07:00",
            "slaDueDate": "2026-03-02T09:00:00Z",
        })
        assert ticket.created_at == datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        assert ticket.updated_at == ticket.created_at
        assert ticket.sla_due_at == datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class TestFieldSchemaRegistry:

    @pytest.mark.asyncio
    async def test_fields_sorted_by_sort_order(self, field_source):
        registry = FieldSchemaRegistry(field_source)
        fields = await registry.load_fields("tpl-incident")
        assert [f.name for f in fields] == ["unit_kerja", "contact_phone", "affected_channels", "notes"]

    @pytest.mark.asyncio
    async def test_ties_keep_source_order(self):
        source = FakeFieldSource({"t": [make_field("b"), make_field("a"), make_field("c", sort_order=-1)]})
        fields = await FieldSchemaRegistry(source).load_fields("t")
        assert [f.name for f in fields] == ["c", "b", "a"]

    @pytest.mark.asyncio
    async def test_blank_template_id(self, field_source):
        with pytest.raises(SchemaLoadError):
            await FieldSchemaRegistry(field_source).load_fields("  ")
        assert field_source.calls == []

    @pytest.mark.asyncio
    async def test_unknown_template(self, field_source):
        with pytest.raises(SchemaLoadError):
            await FieldSchemaRegistry(field_source).load_fields("tpl-missing")

    @pytest.mark.asyncio
    async def test_duplicate_names_rejected(self):
        source = FakeFieldSource({"t": [make_field("a", id="1"), make_field("a", id="2")]})
        with pytest.raises(SchemaLoadError) as exc_info:
            await FieldSchemaRegistry(source).load_fields("t")
        assert exc_info.value.details["duplicates"] == ["a"]

    @pytest.mark.asyncio
    async def test_transport_error_becomes_schema_load_error(self):
        class Unreachable(FakeFieldSource):
            async def get_fields(self, template_id):
                raise TransportError("connection refused")

        with pytest.raises(SchemaLoadError):
            await FieldSchemaRegistry(Unreachable({})).load_fields("t")


class TestFieldValidator:

    @pytest.fixture
    def validator(self):
        return FieldValidator(title_min_length=5, description_min_length=10)

    def test_required_empty_value(self, validator):
        schema = [make_field("contact_phone", "Contact Phone", required=True)]
        assert validator.validate({"contact_phone": ""}, schema) == {
            "contact_phone": "Contact Phone is required"
        }

    def test_whitespace_and_missing_are_blank(self, validator):
        schema = [make_field("a", "A", required=True), make_field("b", "B", required=True)]
        assert validator.validate({"a": "   "}, schema) == {"a": "A is required", "b": "B is required"}

    def test_optional_fields_never_flagged(self, validator):
        schema = [make_field("a", "A"), make_field("b", "B", required=True)]
        assert validator.validate({"b": "0"}, schema) == {}

    def test_non_string_values_converted(self, validator):
        schema = [make_field("count", "Count", field_type="number", required=True)]
        assert validator.validate({"count": 0}, schema) == {}

    def test_no_format_checks(self, validator):
        schema = [make_field("when", "When", field_type="date", required=True)]
        assert validator.validate({"when": "not a date"}, schema) == {}

    def test_errors_follow_schema_order(self, validator, incident_schema):
        schema = FieldSchemaRegistry.order_fields(incident_schema)
        errors = validator.validate({}, schema)
        assert list(errors) == ["unit_kerja", "contact_phone"]

    def test_draft_minimum_lengths(self, validator):
        errors = validator.validate_draft(TicketDraft(title="ATM", description="broken"))
        assert errors == {
            "title": "Title must be at least 5 characters",
            "description": "Description must be at least 10 characters",
        }


class TestTicketAssembler:

    @pytest.fixture
    def assembler(self):
        return TicketAssembler(validator=FieldValidator(title_min_length=5, description_min_length=10))

    @pytest.fixture
    def draft(self):
        return TicketDraft(title="ATM offline", description="The ATM shows an error", priority=TicketPriority.URGENT)

    def test_only_filled_fields_are_sent(self, assembler, draft, incident_schema, incident_selection):
        values = {"contact_phone": "0812", "unit_kerja": "Cabang Utama", "affected_channels": "ATM,Teller", "notes": " "}
        submission = assembler.build(
            incident_selection, draft, values, incident_schema,
            classification=ClassificationSuggestion(
                root_cause=RootCause.SYSTEM_ERROR, issue_category=IssueCategory.PROBLEM
            ),
            now=datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        )
        assert [(v.field_definition_id, v.value) for v in submission.custom_field_values] == [
            ("fd-contact_phone", "0812"),
            ("fd-unit_kerja", "Cabang Utama"),
            ("fd-affected_channels", "ATM,Teller"),
        ]
        payload = submission.to_payload()
        assert payload["templateId"] == "tpl-incident"
        assert payload["rootCause"] == "system_error"
        assert payload["status"] == "open"
        assert payload["slaDueAt"] == "2026-03-01T13:00:00Z"

    def test_missing_required_fields(self, assembler, draft, incident_schema, incident_selection):
        with pytest.raises(ValidationError) as exc_info:
            assembler.build(incident_selection, draft, {}, incident_schema)
        assert exc_info.value.message == "Please fill in all required fields"
        assert set(exc_info.value.details["fields"]) == {"contact_phone", "unit_kerja"}

    def test_approval_required_starts_pending_without_sla(self, assembler, draft):
        selection = CatalogSelection(template_id="t", requires_approval=True)
        submission = assembler.build(selection, draft, {}, [])
        assert submission.status == TicketStatus.PENDING_APPROVAL
        assert submission.sla_due_at is None

    def test_requester_role_needs_approval(self, assembler, draft):
        submission = assembler.build(
            CatalogSelection(template_id="t"), draft, {}, [], user=UserProfile(role="requester")
        )
        assert submission.status == TicketStatus.PENDING_APPROVAL
