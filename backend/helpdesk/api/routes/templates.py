"""Template API Routes - Field schema loading and validation"""
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field

from ..deps import get_correlation_id_dep, get_schema_registry, get_validator
from ...domain.models import FieldDefinition
from ...engine.field_validator import FieldValidator
from ...engine.schema_registry import FieldSchemaRegistry
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================

class FieldListResponse(BaseModel):
    """Ordered fields of a template"""
    template_id: str
    fields: List[FieldDefinition]


class ValidateRequest(BaseModel):
    """Values to check against a schema"""
    fields: List[FieldDefinition] = Field(..., validation_alias=AliasChoices("schema", "fields"))
    values: Dict[str, Optional[str]] = Field(default_factory=dict)


class ValidateResponse(BaseModel):
    """Validation result; errors keyed by field name in schema order"""
    valid: bool
    errors: Dict[str, str]


# ============================================================================
# Routes
# ============================================================================

@router.get("/{template_id}/fields", response_model=FieldListResponse)
async def get_template_fields(
    template_id: str,
    registry: FieldSchemaRegistry = Depends(get_schema_registry),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Load the ordered field definitions of a template"""
    fields = await registry.load_fields(template_id)
    return FieldListResponse(template_id=template_id, fields=fields)


@router.post("/validate", response_model=ValidateResponse)
async def validate_values(
    request: ValidateRequest,
    validator: FieldValidator = Depends(get_validator),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Check required fields; never fails, reports errors in the body"""
    schema = FieldSchemaRegistry.order_fields(request.fields)
    errors = validator.validate(request.values, schema)
    return ValidateResponse(valid=not errors, errors=errors)
