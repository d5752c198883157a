"""ID Generation Utilities"""
import uuid

from .time import utc_now


def generate_correlation_id() -> str:
    """
    Generate a correlation ID for request tracing

    Returns:
        Correlation ID string with timestamp prefix, e.g. COR-20250101120000-1a2b3c4d
    """
    timestamp = utc_now().strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:8]
    return f"COR-{timestamp}-{unique_part}"

