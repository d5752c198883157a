"""Classification API Routes - Smart default root cause / issue category"""
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..deps import get_correlation_id_dep
from ...domain.models import ClassificationSuggestion
from ...engine.classifier import get_classifier
from ...config.settings import settings

router = APIRouter()


class SuggestRequest(BaseModel):
    """Catalog names to classify"""
    category: Optional[str] = None
    service: Optional[str] = None
    template: Optional[str] = None
    rule_set: Optional[str] = None


@router.post("/suggest", response_model=ClassificationSuggestion)
async def suggest_classification(
    request: SuggestRequest,
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Both values come back null when no rule matched"""
    classifier = get_classifier(request.rule_set or settings.classifier_rule_set)
    return classifier.classify(request.category, request.service, request.template)
