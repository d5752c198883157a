"""Ticket Workflow API Routes - Status transitions and SLA checks"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..deps import get_correlation_id_dep, get_workflow
from ...domain.enums import TransitionEvent
from ...domain.models import Ticket
from ...engine.ticket_workflow import TicketWorkflow
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================

class TransitionRequest(BaseModel):
    """Apply one event to a ticket"""
    ticket: Ticket
    event: TransitionEvent
    comment: Optional[str] = None


class OverdueRequest(BaseModel):
    ticket: Ticket
    now: Optional[datetime] = None


class OverdueResponse(BaseModel):
    ticket_id: str
    overdue: bool


# ============================================================================
# Routes
# ============================================================================

@router.post("/transition", response_model=Ticket)
async def transition_ticket(
    request: TransitionRequest,
    workflow: TicketWorkflow = Depends(get_workflow),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Apply a transition and return the updated ticket

    Rejecting without a comment answers 400, a second decision 409
    (DUPLICATE_ACTION), and an event not allowed from the current status
    409 (INVALID_STATE).
    """
    return workflow.transition(request.ticket, request.event, request.comment)


@router.post("/overdue", response_model=OverdueResponse)
async def check_overdue(
    request: OverdueRequest,
    workflow: TicketWorkflow = Depends(get_workflow),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    return OverdueResponse(
        ticket_id=request.ticket.id,
        overdue=workflow.is_overdue(request.ticket, request.now)
    )
