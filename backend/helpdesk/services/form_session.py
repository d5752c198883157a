"""
Form Session - Scoped state for filling in one ticket form

A session owns the active catalog selection, its field schema, the value
store and the classification. Every public operation returns an Outcome;
domain errors raised by the engine are converted here and never escape.

Loads triggered by a template selection are tagged with the selection that
was active when they started. If the user picks another template before a
load returns, its result is discarded instead of being applied.
"""
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..domain.enums import IssueCategory, RootCause
from ..domain.errors import DomainError, DuplicateActionError, TransportError, ValidationError
from ..domain.interfaces import (
    FieldDefinitionSource, MasterDataSource, TicketPersistence, UserProfileSource
)
from ..domain.models import (
    CatalogSelection, ClassificationSuggestion, FieldDefinition, MasterDataOption,
    Outcome, TicketDraft, UserProfile
)
from ..engine.autofill import OrgUnitAutofill
from ..engine.classifier import ClassificationStrategy, get_classifier
from ..engine.field_store import FieldValueStore
from ..engine.schema_registry import FieldSchemaRegistry
from ..engine.ticket_assembler import TicketAssembler
from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

SUBMIT_IN_PROGRESS = "A ticket submission is already in progress"


class FormSession:
    """Form state for one user filling in one ticket at a time"""

    def __init__(
        self,
        field_source: FieldDefinitionSource,
        persistence: TicketPersistence,
        master_data: Optional[MasterDataSource] = None,
        profile_source: Optional[UserProfileSource] = None,
        classifier: Optional[ClassificationStrategy] = None,
        autofill: Optional[OrgUnitAutofill] = None,
        assembler: Optional[TicketAssembler] = None
    ):
        self.registry = FieldSchemaRegistry(field_source)
        self.persistence = persistence
        self.master_data = master_data
        self.profile_source = profile_source
        self.classifier = classifier or get_classifier(settings.classifier_rule_set)
        self.autofill = autofill or OrgUnitAutofill()
        self.assembler = assembler or TicketAssembler()

        self.store = FieldValueStore()
        self.selection: Optional[CatalogSelection] = None
        self.schema: List[FieldDefinition] = []
        self.classification = ClassificationSuggestion()
        self.classification_dirty = False
        self.user: Optional[UserProfile] = None

        self._master_options: Dict[str, List[MasterDataOption]] = {}
        self._generation = 0
        self._submitting = False

    # =========================================================================
    # Selection Tagging
    # =========================================================================

    def _tag(self) -> Tuple[int, Optional[str]]:
        return self._generation, self.selection.template_id if self.selection else None

    def _is_stale(self, tag: Tuple[int, Optional[str]]) -> bool:
        if tag != self._tag():
            logger.info(
                f"Discarding stale response for template {tag[1]}",
                extra={"template_id": tag[1], "action": "discard"}
            )
            return True
        return False

    def _clear_form(self) -> None:
        self.store.clear()
        self.schema = []
        self._master_options = {}
        self.classification = ClassificationSuggestion()
        self.classification_dirty = False

    # =========================================================================
    # Template Selection
    # =========================================================================

    async def select_template(self, selection: CatalogSelection) -> Outcome:
        """
        Switch to a template and load its fields and defaults

        Returns:
            Outcome with the ordered field definitions, an error outcome when
            the schema cannot be loaded, or a discarded outcome when another
            template was selected meanwhile
        """
        self._generation += 1
        self.selection = selection
        self._clear_form()
        tag = self._tag()

        try:
            fields = await self.registry.load_fields(selection.template_id)
        except DomainError as e:
            if self._is_stale(tag):
                return Outcome.discarded()
            logger.warning(
                f"Could not load template {selection.template_id}: {e.message}",
                extra={"template_id": selection.template_id, "error_code": e.error_code}
            )
            return Outcome.failure(e)

        if self._is_stale(tag):
            return Outcome.discarded()
        self.schema = fields
        self.store.initialize(fields)

        master_options = await self._load_master_data(fields)
        if self._is_stale(tag):
            return Outcome.discarded()
        self._master_options = master_options

        if self.user is None:
            user = await self._load_user()
            if self._is_stale(tag):
                return Outcome.discarded()
            self.user = user

        self._apply_defaults()
        return Outcome.success(list(self.schema))

    async def _load_master_data(self, fields: Sequence[FieldDefinition]) -> Dict[str, List[MasterDataOption]]:
        """Options for choice-type unit fields; failures fall back to the field's own options"""
        options: Dict[str, List[MasterDataOption]] = {}
        if self.master_data is None:
            return options
        for field in self.autofill.unit_fields(fields):
            if not field.field_type.is_choice:
                continue
            try:
                options[field.name] = await self.master_data.get_options(field.name)
            except TransportError as e:
                logger.warning(
                    f"Master data for {field.name} unavailable: {e.message}",
                    extra={"field_name": field.name, "error_code": e.error_code}
                )
        return options

    async def _load_user(self) -> Optional[UserProfile]:
        if self.profile_source is None:
            return None
        try:
            return await self.profile_source.get_current_user()
        except DomainError as e:
            logger.warning(f"Current user unavailable, skipping autofill: {e.message}")
            return None

    # =========================================================================
    # Smart Defaults
    # =========================================================================

    def _apply_defaults(self) -> None:
        defaults = self.autofill.compute(self.schema, self.user, self._master_options)
        for name, raw in defaults.items():
            self.store.apply_default(name, raw)

        if not self.classification_dirty and self.selection is not None:
            self.classification = self.classifier.classify(
                self.selection.category_name,
                self.selection.service_name,
                self.selection.template_name
            )

    def refresh_defaults(self) -> Outcome:
        """Re-run autofill and classification; user-edited values are kept"""
        if self.selection is None:
            return Outcome.failure(ValidationError("No template selected"))
        self._apply_defaults()
        return Outcome.success(self.store.raw_values())

    # =========================================================================
    # Editing
    # =========================================================================

    def set_value(self, name: str, raw: str) -> Outcome:
        try:
            self.store.set_raw(name, raw)
        except DomainError as e:
            return Outcome.failure(e)
        return Outcome.success(self.store.get_raw(name))

    def toggle_option(self, name: str, option: str) -> Outcome:
        """Check or uncheck one option of a checkbox-multi field"""
        try:
            return Outcome.success(self.store.toggle(name, option))
        except DomainError as e:
            return Outcome.failure(e)

    def set_classification(
        self,
        root_cause: Optional[RootCause] = None,
        issue_category: Optional[IssueCategory] = None
    ) -> Outcome:
        """User-chosen classification; suppresses later automatic classification"""
        self.classification = ClassificationSuggestion(
            root_cause=root_cause,
            issue_category=issue_category
        )
        self.classification_dirty = True
        return Outcome.success(self.classification)

    def reset(self) -> None:
        """Empty every field and forget user edits; the selection is kept"""
        self.store.initialize(self.schema)
        self.classification = ClassificationSuggestion()
        self.classification_dirty = False

    def values(self) -> Mapping[str, str]:
        return self.store.raw_values()

    def validate(self) -> Dict[str, str]:
        """Field name -> message for every required field left blank"""
        return self.assembler.validator.validate(self.store.raw_values(), self.schema)

    # =========================================================================
    # Submission
    # =========================================================================

    @property
    def can_submit(self) -> bool:
        return self.selection is not None and not self._submitting

    async def submit(self, draft: TicketDraft) -> Outcome:
        """
        Validate, assemble and persist the ticket

        Returns:
            Outcome with the new ticket id. A second call while one is in
            flight returns a DuplicateActionError outcome without reaching
            the backend.
        """
        if self._submitting:
            return Outcome.failure(DuplicateActionError(SUBMIT_IN_PROGRESS))
        if self.selection is None:
            return Outcome.failure(ValidationError("No template selected"))

        self._submitting = True
        selection = self.selection
        tag = self._tag()
        try:
            submission = self.assembler.build(
                selection,
                draft,
                self.store.raw_values(),
                self.schema,
                classification=self.classification,
                user=self.user
            )
            ticket_id = await self.persistence.create_ticket(submission)
        except DomainError as e:
            logger.warning(
                f"Ticket submission failed: {e.message}",
                extra={"template_id": selection.template_id, "error_code": e.error_code}
            )
            return Outcome.failure(e)
        finally:
            self._submitting = False

        logger.info(
            f"Submitted ticket {ticket_id}",
            extra={"ticket_id": ticket_id, "template_id": selection.template_id, "action": "submit"}
        )
        # A template picked while the submit was in flight keeps its form
        if not self._is_stale(tag):
            self._generation += 1
            self.selection = None
            self._clear_form()
        return Outcome.success(ticket_id)
