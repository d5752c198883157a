"""Approval Service - Manager approve/reject over the ticket persistence API"""
from datetime import datetime
from typing import Optional, Set

from ..domain.enums import ApprovalAction, TransitionEvent
from ..domain.errors import DomainError, DuplicateActionError
from ..domain.interfaces import TicketPersistence
from ..domain.models import Outcome, Ticket
from ..engine.ticket_workflow import TicketWorkflow
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ApprovalService:
    """
    Record manager decisions

    The transition is checked locally first so invalid requests (reject
    without comment, ticket not pending, decision already recorded) never
    reach the backend. The backend's returned ticket is authoritative.
    """

    def __init__(
        self,
        persistence: TicketPersistence,
        workflow: Optional[TicketWorkflow] = None
    ):
        self.persistence = persistence
        self.workflow = workflow or TicketWorkflow()
        self._in_flight: Set[str] = set()

    async def approve(self, ticket: Ticket, comment: Optional[str] = None) -> Outcome:
        return await self._decide(ticket, TransitionEvent.APPROVE, ApprovalAction.APPROVE, comment)

    async def reject(self, ticket: Ticket, comment: Optional[str]) -> Outcome:
        return await self._decide(ticket, TransitionEvent.REJECT, ApprovalAction.REJECT, comment)

    async def _decide(
        self,
        ticket: Ticket,
        event: TransitionEvent,
        action: ApprovalAction,
        comment: Optional[str]
    ) -> Outcome:
        if ticket.id in self._in_flight:
            return Outcome.failure(DuplicateActionError(
                f"A decision for ticket {ticket.id} is already being submitted",
                details={"ticket_id": ticket.id}
            ))

        try:
            expected = self.workflow.transition(ticket, event, comment)
        except DomainError as e:
            logger.info(
                f"{action.value} blocked for ticket {ticket.id}: {e.message}",
                extra={"ticket_id": ticket.id, "action": action.value, "error_code": e.error_code}
            )
            return Outcome.failure(e)

        self._in_flight.add(ticket.id)
        try:
            updated = await self.persistence.submit_approval(
                ticket.id, action, expected.approval_comment
            )
        except DomainError as e:
            logger.warning(
                f"{action.value} failed for ticket {ticket.id}: {e.message}",
                extra={"ticket_id": ticket.id, "action": action.value, "error_code": e.error_code}
            )
            return Outcome.failure(e)
        finally:
            self._in_flight.discard(ticket.id)

        return Outcome.success(updated)

    def is_overdue(self, ticket: Ticket, now: Optional[datetime] = None) -> bool:
        return self.workflow.is_overdue(ticket, now)
