"""API Routes module"""
from fastapi import APIRouter

from .templates import router as templates_router
from .classification import router as classification_router
from .master_data import router as master_data_router
from .ticket_workflow import router as ticket_workflow_router

# Main API router
api_router = APIRouter()

api_router.include_router(templates_router, prefix="/templates", tags=["Templates"])
api_router.include_router(classification_router, prefix="/classification", tags=["Classification"])
api_router.include_router(master_data_router, prefix="/master-data", tags=["Master Data"])
api_router.include_router(ticket_workflow_router, prefix="/tickets", tags=["Tickets"])

__all__ = ["api_router"]
