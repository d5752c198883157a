"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class FieldType(str, Enum):
    """Supported custom field types"""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    DROPDOWN = "dropdown"
    RADIO = "radio"
    CHECKBOX_SINGLE = "checkbox-single"
    CHECKBOX_MULTI = "checkbox-multi"
    TEXTAREA = "textarea"

    @property
    def is_choice(self) -> bool:
        """Choice types carry an options list"""
        return self in CHOICE_FIELD_TYPES


CHOICE_FIELD_TYPES = frozenset({
    FieldType.DROPDOWN,
    FieldType.RADIO,
    FieldType.CHECKBOX_SINGLE,
    FieldType.CHECKBOX_MULTI,
})


class TicketStatus(str, Enum):
    """Global ticket status"""
    OPEN = "open"
    PENDING_APPROVAL = "pending-approval"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"  # Terminal, also used for rejected tickets


class TicketPriority(str, Enum):
    """Ticket priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class RootCause(str, Enum):
    """Root cause classification"""
    HUMAN_ERROR = "human_error"
    SYSTEM_ERROR = "system_error"
    EXTERNAL_FACTOR = "external_factor"
    UNDETERMINED = "undetermined"


class IssueCategory(str, Enum):
    """Issue category classification"""
    REQUEST = "request"
    COMPLAINT = "complaint"
    PROBLEM = "problem"


class ApprovalAction(str, Enum):
    """Manager approval actions"""
    APPROVE = "approve"
    REJECT = "reject"


class TransitionEvent(str, Enum):
    """Events that trigger ticket status transitions"""
    APPROVE = "approve"
    REJECT = "reject"
    START = "start"
    RESOLVE = "resolve"
    CLOSE = "close"


class OutcomeStatus(str, Enum):
    """Discriminator for results returned across the engine boundary"""
    OK = "ok"
    ERROR = "error"
    DISCARDED = "discarded"  # Stale response suppressed after a template switch
