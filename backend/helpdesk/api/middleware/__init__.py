"""
API Middleware

    - correlation: request correlation ID and access log line
    - error_handlers: DomainError / request validation -> JSON error envelope
"""

from .correlation import CorrelationIdMiddleware
from .error_handlers import register_error_handlers

__all__ = ["CorrelationIdMiddleware", "register_error_handlers"]
