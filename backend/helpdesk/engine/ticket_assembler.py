"""Ticket Assembler - Turn a validated form into a ticket submission"""
from datetime import datetime
from typing import List, Mapping, Optional, Sequence

from ..domain.models import (
    CatalogSelection, ClassificationSuggestion, CustomFieldValue, FieldDefinition,
    TicketDraft, TicketSubmission, UserProfile
)
from .field_validator import FieldValidator
from .ticket_workflow import TicketWorkflow


class TicketAssembler:
    """
    Gate submission on validation and build the persistence payload

    Only schema fields with a non-blank value become custom field values,
    keyed by field definition id and in schema order.
    """

    def __init__(
        self,
        validator: Optional[FieldValidator] = None,
        workflow: Optional[TicketWorkflow] = None
    ):
        self.validator = validator or FieldValidator()
        self.workflow = workflow or TicketWorkflow()

    @staticmethod
    def custom_field_values(
        values: Mapping[str, str],
        schema: Sequence[FieldDefinition]
    ) -> List[CustomFieldValue]:
        entries = []
        for field in schema:
            raw = values.get(field.name)
            if raw is None or not str(raw).strip():
                continue
            entries.append(CustomFieldValue(field_definition_id=field.id, value=str(raw)))
        return entries

    def build(
        self,
        selection: CatalogSelection,
        draft: TicketDraft,
        values: Mapping[str, str],
        schema: Sequence[FieldDefinition],
        classification: Optional[ClassificationSuggestion] = None,
        user: Optional[UserProfile] = None,
        now: Optional[datetime] = None
    ) -> TicketSubmission:
        """
        Raises:
            ValidationError: Draft too short or required fields missing;
                details["fields"] maps field name -> message
        """
        self.validator.ensure_valid(draft, values, list(schema))

        classification = classification or ClassificationSuggestion()
        status = self.workflow.initial_status(selection, user)

        return TicketSubmission(
            title=draft.title.strip(),
            description=draft.description.strip(),
            priority=draft.priority,
            template_id=selection.template_id,
            item_id=selection.item_id,
            service_id=selection.service_id,
            custom_field_values=self.custom_field_values(values, schema),
            root_cause=classification.root_cause,
            issue_category=classification.issue_category,
            status=status,
            sla_due_at=self.workflow.initial_sla_due_at(status, draft.priority, now)
        )
