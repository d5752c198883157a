"""Ticket Workflow - Status transitions, manager approval and SLA derivation"""
from datetime import datetime
from typing import Dict, Mapping, Optional, Sequence, Tuple

from ..domain.enums import ApprovalAction, TicketPriority, TicketStatus, TransitionEvent
from ..domain.errors import DuplicateActionError, InvalidStateError, ValidationError
from ..domain.models import CatalogSelection, Ticket, UserProfile
from ..config.settings import settings
from ..utils.logger import get_logger
from ..utils.time import add_hours, is_past, utc_now

logger = get_logger(__name__)


REJECT_COMMENT_REQUIRED = "Comments are required when rejecting a ticket"

# (from status, event) -> to status. `closed` has no outgoing edges.
TRANSITIONS: Dict[Tuple[TicketStatus, TransitionEvent], TicketStatus] = {
    (TicketStatus.PENDING_APPROVAL, TransitionEvent.APPROVE): TicketStatus.OPEN,
    (TicketStatus.PENDING_APPROVAL, TransitionEvent.REJECT): TicketStatus.CLOSED,
    (TicketStatus.OPEN, TransitionEvent.START): TicketStatus.IN_PROGRESS,
    (TicketStatus.OPEN, TransitionEvent.RESOLVE): TicketStatus.RESOLVED,
    (TicketStatus.IN_PROGRESS, TransitionEvent.RESOLVE): TicketStatus.RESOLVED,
    (TicketStatus.OPEN, TransitionEvent.CLOSE): TicketStatus.CLOSED,
    (TicketStatus.IN_PROGRESS, TransitionEvent.CLOSE): TicketStatus.CLOSED,
    (TicketStatus.RESOLVED, TransitionEvent.CLOSE): TicketStatus.CLOSED,
}

APPROVAL_EVENTS = {TransitionEvent.APPROVE, TransitionEvent.REJECT}


def _clean_comment(comment: Optional[str]) -> Optional[str]:
    if comment is None or not comment.strip():
        return None
    return comment.strip()


class SlaPolicy:
    """SLA due date by priority"""

    def __init__(self, hours_by_priority: Optional[Mapping[str, int]] = None):
        self.hours_by_priority = dict(hours_by_priority or settings.sla_hours_by_priority)

    def hours_for(self, priority: TicketPriority) -> int:
        return self.hours_by_priority.get(
            priority.value,
            self.hours_by_priority.get(TicketPriority.MEDIUM.value, 72)
        )

    def due_at(self, priority: TicketPriority, start: Optional[datetime] = None) -> datetime:
        return add_hours(start or utc_now(), self.hours_for(priority))


class ApprovalPolicy:
    """Decide whether a new ticket needs manager sign-off"""

    def __init__(self, roles: Optional[Sequence[str]] = None):
        self.roles = {r.lower() for r in (roles if roles is not None else settings.approval_required_roles_list)}

    def requires_approval(
        self,
        selection: Optional[CatalogSelection] = None,
        user: Optional[UserProfile] = None
    ) -> bool:
        if selection is not None and selection.requires_approval:
            return True
        return bool(user and user.role and user.role.lower() in self.roles)

    def initial_status(
        self,
        selection: Optional[CatalogSelection] = None,
        user: Optional[UserProfile] = None
    ) -> TicketStatus:
        if self.requires_approval(selection, user):
            return TicketStatus.PENDING_APPROVAL
        return TicketStatus.OPEN


def is_overdue(ticket: Ticket, now: Optional[datetime] = None) -> bool:
    """True iff the SLA due date is strictly past and the ticket is not closed"""
    if ticket.status == TicketStatus.CLOSED:
        return False
    return is_past(ticket.sla_due_at, now)


class TicketWorkflow:
    """
    Ticket status state machine

    Transitions are pure: the ticket passed in is never mutated, a new
    instance is returned. Guards are checked in this order:
    1. reject requires a non-blank comment
    2. approve/reject on a ticket that already carries a decision -> DuplicateActionError
    3. (status, event) must be in TRANSITIONS -> InvalidStateError
    """

    def __init__(
        self,
        sla_policy: Optional[SlaPolicy] = None,
        approval_policy: Optional[ApprovalPolicy] = None
    ):
        self.sla_policy = sla_policy or SlaPolicy()
        self.approval_policy = approval_policy or ApprovalPolicy()

    # =========================================================================
    # Creation
    # =========================================================================

    def initial_status(
        self,
        selection: Optional[CatalogSelection] = None,
        user: Optional[UserProfile] = None
    ) -> TicketStatus:
        return self.approval_policy.initial_status(selection, user)

    def initial_sla_due_at(
        self,
        status: TicketStatus,
        priority: TicketPriority,
        now: Optional[datetime] = None
    ) -> Optional[datetime]:
        """Tickets starting open get their SLA immediately; pending ones on approval"""
        if status != TicketStatus.OPEN:
            return None
        return self.sla_policy.due_at(priority, now)

    # =========================================================================
    # Transitions
    # =========================================================================

    def can_transition(self, ticket: Ticket, event: TransitionEvent) -> bool:
        return (ticket.status, event) in TRANSITIONS

    def transition(
        self,
        ticket: Ticket,
        event: TransitionEvent,
        comment: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Ticket:
        """
        Apply an event to a ticket

        Args:
            ticket: Current ticket
            event: Transition event
            comment: Approval/rejection comment
            now: Clock override

        Returns:
            Updated copy of the ticket

        Raises:
            ValidationError: Reject without a comment
            DuplicateActionError: Approval decision already recorded
            InvalidStateError: Event not allowed from the current status
        """
        event = TransitionEvent(event)
        now = now or utc_now()
        cleaned = _clean_comment(comment)

        if event == TransitionEvent.REJECT and cleaned is None:
            raise ValidationError(
                REJECT_COMMENT_REQUIRED,
                details={"ticket_id": ticket.id, "field": "comment"}
            )

        if event in APPROVAL_EVENTS and ticket.approval_decision is not None:
            raise DuplicateActionError(
                f"An approval decision ({ticket.approval_decision.value}) is already recorded for ticket {ticket.id}",
                details={"ticket_id": ticket.id, "decision": ticket.approval_decision.value}
            )

        target = TRANSITIONS.get((ticket.status, event))
        if target is None:
            raise InvalidStateError(
                f"Cannot {event.value} a ticket in status {ticket.status.value}",
                details={"ticket_id": ticket.id, "status": ticket.status.value, "event": event.value}
            )

        update = {"status": target, "updated_at": now}
        if event == TransitionEvent.APPROVE:
            update["approval_decision"] = ApprovalAction.APPROVE
            update["approval_comment"] = cleaned
            if ticket.sla_due_at is None:
                update["sla_due_at"] = self.sla_policy.due_at(ticket.priority, now)
        elif event == TransitionEvent.REJECT:
            update["approval_decision"] = ApprovalAction.REJECT
            update["approval_comment"] = cleaned

        logger.info(
            f"Ticket {ticket.id}: {ticket.status.value} -> {target.value}",
            extra={"ticket_id": ticket.id, "action": event.value, "status": target.value}
        )
        return ticket.model_copy(update=update)

    def approve(self, ticket: Ticket, comment: Optional[str] = None, now: Optional[datetime] = None) -> Ticket:
        return self.transition(ticket, TransitionEvent.APPROVE, comment, now)

    def reject(self, ticket: Ticket, comment: Optional[str], now: Optional[datetime] = None) -> Ticket:
        return self.transition(ticket, TransitionEvent.REJECT, comment, now)

    def start(self, ticket: Ticket, now: Optional[datetime] = None) -> Ticket:
        return self.transition(ticket, TransitionEvent.START, now=now)

    def resolve(self, ticket: Ticket, now: Optional[datetime] = None) -> Ticket:
        return self.transition(ticket, TransitionEvent.RESOLVE, now=now)

    def close(self, ticket: Ticket, now: Optional[datetime] = None) -> Ticket:
        return self.transition(ticket, TransitionEvent.CLOSE, now=now)

    def is_overdue(self, ticket: Ticket, now: Optional[datetime] = None) -> bool:
        return is_overdue(ticket, now)
