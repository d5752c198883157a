"""Master Data API Routes - Fuzzy matching of free text to options"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_correlation_id_dep
from ...domain.models import MasterDataOption
from ...engine.fuzzy_matcher import find_best_match

router = APIRouter()


class MatchRequest(BaseModel):
    query: str = ""
    candidates: List[MasterDataOption] = Field(default_factory=list)


class MatchResponse(BaseModel):
    match: Optional[MasterDataOption] = None


@router.post("/match", response_model=MatchResponse)
async def match_option(
    request: MatchRequest,
    correlation_id: str = Depends(get_correlation_id_dep)
):
    return MatchResponse(match=find_best_match(request.query, request.candidates))
