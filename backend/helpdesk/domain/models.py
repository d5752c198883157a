"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field, ConfigDict, AliasChoices, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .enums import (
    FieldType, TicketStatus, TicketPriority, RootCause, IssueCategory,
    ApprovalAction, OutcomeStatus
)
from .errors import DomainError
from ..utils.time import format_iso, parse_iso


class WireModel(BaseModel):
    """Base for models exchanged with the helpdesk backend (camelCase on the wire)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )


# Legacy type names still sent by older templates
FIELD_TYPE_ALIASES = {
    "select": "dropdown",
    "searchable_dropdown": "dropdown",
    "checkbox": "checkbox-single",
    "multiselect": "checkbox-multi",
    "datetime-local": "datetime",
}


def _coerce_id(value: Any) -> Any:
    """Backend ids are often integers; keep them as strings internally"""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# ============================================================================
# Field Schema
# ============================================================================

class FieldOption(WireModel):
    """Selectable option of a choice field"""
    value: str
    label: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def _value_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @model_validator(mode="after")
    def _label_defaults_to_value(self) -> "FieldOption":
        if not self.label:
            self.label = self.value
        return self


class FieldDefinition(WireModel):
    """Custom field definition belonging to a template"""

    id: str = Field(..., description="Field definition ID")
    name: str = Field(..., validation_alias=AliasChoices("name", "fieldName"), description="Unique within template")
    label: str = Field(..., validation_alias=AliasChoices("label", "fieldLabel"))
    field_type: FieldType = Field(
        default=FieldType.TEXT,
        validation_alias=AliasChoices("fieldType", "field_type", "type")
    )
    required: bool = Field(default=False, validation_alias=AliasChoices("required", "isRequired"))
    options: List[FieldOption] = Field(default_factory=list, description="Options for choice types")
    placeholder: Optional[str] = Field(None, validation_alias=AliasChoices("placeholder", "placeholderText"))
    help_text: Optional[str] = Field(None, validation_alias=AliasChoices("helpText", "help_text"))
    max_length: Optional[int] = Field(None, validation_alias=AliasChoices("maxLength", "max_length"))
    sort_order: int = Field(default=0, validation_alias=AliasChoices("sortOrder", "sort_order"))

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("field_type", mode="before")
    @classmethod
    def _unknown_type_is_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = FIELD_TYPE_ALIASES.get(v.lower(), v.lower())
        try:
            return FieldType(v)
        except ValueError:
            # Unknown types are treated as free text
            return FieldType.TEXT

    @field_validator("options", mode="before")
    @classmethod
    def _plain_string_options(cls, v: Any) -> Any:
        if v is None:
            return []
        return [{"value": o, "label": o} if isinstance(o, str) else o for o in v]


# ============================================================================
# Master Data & User Profile
# ============================================================================

class MasterDataOption(WireModel):
    """Candidate from a master-data list (branches, units, ...)"""

    value: Optional[str] = None
    label: Optional[str] = None
    display_name: Optional[str] = None
    name: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _value_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @property
    def text(self) -> str:
        """Display text used for matching: label, then displayName, then name"""
        return self.label or self.display_name or self.name or ""


class OrgUnit(WireModel):
    """Department or unit reference on a user profile"""
    id: Optional[str] = None
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)


class UserProfile(WireModel):
    """Current user as returned by the profile source"""
    id: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
    department: Optional[OrgUnit] = None
    unit: Optional[OrgUnit] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)


# ============================================================================
# Classification
# ============================================================================

class ClassificationSuggestion(WireModel):
    """Smart-default classification; either field may be unset"""
    root_cause: Optional[RootCause] = None
    issue_category: Optional[IssueCategory] = None

    @property
    def is_empty(self) -> bool:
        return self.root_cause is None and self.issue_category is None


# ============================================================================
# Catalog Selection & Ticket Submission
# ============================================================================

class CatalogSelection(WireModel):
    """What the user picked in the service catalog"""
    template_id: str
    item_id: Optional[str] = None
    service_id: Optional[str] = None
    category_name: str = ""
    service_name: str = ""
    template_name: str = ""
    requires_approval: bool = False

    @field_validator("template_id", "item_id", "service_id", mode="before")
    @classmethod
    def _ids_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)


class TicketDraft(WireModel):
    """Fixed ticket fields entered next to the custom fields"""
    title: str = ""
    description: str = ""
    priority: TicketPriority = TicketPriority.MEDIUM


class CustomFieldValue(WireModel):
    """A custom field value stored on a ticket"""
    field_definition_id: str
    value: str

    @field_validator("field_definition_id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)


class TicketSubmission(WireModel):
    """Payload for the ticket persistence API"""
    title: str
    description: str
    priority: TicketPriority
    template_id: str
    item_id: Optional[str] = None
    service_id: Optional[str] = None
    custom_field_values: List[CustomFieldValue] = Field(default_factory=list)
    root_cause: Optional[RootCause] = None
    issue_category: Optional[IssueCategory] = None
    status: Optional[TicketStatus] = None
    sla_due_at: Optional[datetime] = None

    @field_serializer("sla_due_at")
    def _sla_as_utc(self, v: Optional[datetime]) -> Optional[str]:
        return format_iso(v) if v is not None else None

    def to_payload(self) -> dict:
        """JSON body for POST ticket"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ApprovalRequest(WireModel):
    """Payload for the approval endpoint"""
    ticket_id: str
    action: ApprovalAction
    comment: Optional[str] = None


# ============================================================================
# Ticket
# ============================================================================

class Ticket(WireModel):
    """Ticket as persisted by the helpdesk backend"""

    id: str
    title: str
    description: Optional[str] = None
    priority: TicketPriority = TicketPriority.MEDIUM
    status: TicketStatus = TicketStatus.OPEN
    created_at: datetime
    updated_at: datetime
    sla_due_at: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("slaDueAt", "sla_due_at", "slaDueDate")
    )
    root_cause: Optional[RootCause] = None
    issue_category: Optional[IssueCategory] = None
    custom_field_values: List[CustomFieldValue] = Field(default_factory=list)
    approval_decision: Optional[ApprovalAction] = None
    approval_comment: Optional[str] = Field(
        None, validation_alias=AliasChoices("approvalComment", "approval_comment", "managerComments")
    )

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("created_at", "updated_at", "sla_due_at", mode="before")
    @classmethod
    def _timestamps_to_utc(cls, v: Any) -> Any:
        # Legacy records send naive or space-separated timestamps
        if isinstance(v, str) and v:
            return parse_iso(v)
        return v


# ============================================================================
# Boundary Results
# ============================================================================

T = TypeVar("T")


class ErrorInfo(BaseModel):
    """Serializable view of a DomainError"""
    code: str
    message: str
    details: dict = Field(default_factory=dict)
    informational: bool = False

    @classmethod
    def from_error(cls, error: DomainError) -> "ErrorInfo":
        return cls(
            code=error.error_code,
            message=error.message,
            details=error.details,
            informational=error.informational
        )


class Outcome(BaseModel, Generic[T]):
    """
    Discriminated result returned by the form session and approval service.

    Exactly one of `value` (status OK) or `error` (status ERROR) is meaningful;
    DISCARDED marks a response suppressed because the template changed.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: OutcomeStatus
    value: Optional[T] = None
    error: Optional[ErrorInfo] = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.OK

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(status=OutcomeStatus.OK, value=value)

    @classmethod
    def failure(cls, error: DomainError) -> "Outcome":
        return cls(status=OutcomeStatus.ERROR, error=ErrorInfo.from_error(error))

    @classmethod
    def discarded(cls) -> "Outcome":
        return cls(status=OutcomeStatus.DISCARDED)
