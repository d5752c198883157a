"""Service modules - Form sessions, approvals and the helpdesk backend client"""
from .helpdesk_api import HelpdeskApiClient
from .form_session import FormSession
from .approval_service import ApprovalService

__all__ = [
    "HelpdeskApiClient",
    "FormSession",
    "ApprovalService",
]
