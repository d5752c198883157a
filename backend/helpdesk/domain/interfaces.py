"""
Domain interfaces - External collaborators consumed by the field engine.

The engine never talks to the network directly; it depends on these
abstractions so tests and alternative backends can be plugged in.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from .enums import ApprovalAction
from .models import FieldDefinition, MasterDataOption, Ticket, TicketSubmission, UserProfile


class FieldDefinitionSource(ABC):
    """Source of template field schemas"""

    @abstractmethod
    async def get_fields(self, template_id: str) -> List[FieldDefinition]:
        """Load field definitions for a template. Raises SchemaLoadError."""


class MasterDataSource(ABC):
    """Source of master-data option lists"""

    @abstractmethod
    async def get_options(self, field_name: str) -> List[MasterDataOption]:
        """Load candidate options for a choice field. Raises TransportError."""


class TicketPersistence(ABC):
    """Ticket persistence API"""

    @abstractmethod
    async def create_ticket(self, submission: TicketSubmission) -> str:
        """Persist a new ticket and return its id"""

    @abstractmethod
    async def submit_approval(
        self,
        ticket_id: str,
        action: ApprovalAction,
        comment: Optional[str] = None
    ) -> Ticket:
        """Record a manager decision and return the updated ticket"""


class UserProfileSource(ABC):
    """Current user profile"""

    @abstractmethod
    async def get_current_user(self) -> UserProfile:
        """Return the signed-in user's profile"""
