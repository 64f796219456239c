"""
Talent analysis API endpoints
Cultural-fit reports and job-match scoring backed by the completion service.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from lendaria.application.analysis import JobMatch, analyze_cultural_fit, analyze_job_match
from lendaria.core.exceptions import LendariaException, map_exception_to_http
from lendaria.core.logging import get_logger
from lendaria.infrastructure.ai import CompletionClient, build_completion_client

logger = get_logger(__name__)

router = APIRouter(prefix="/api/analysis", tags=["Talent Analysis"])


class CulturalFitRequest(BaseModel):
    talent_name: str = Field(..., min_length=1)
    bio: str = ""
    transcript: str = ""


class CulturalFitResponse(BaseModel):
    analysis: str


class TalentPayload(BaseModel):
    role: Optional[str] = None
    bio: Optional[str] = None
    tags: List[str] = []
    products: List[Any] = []


class JobPayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    title: Optional[str] = None
    mission: Optional[str] = None
    responsibilities: Any = None


class JobMatchRequest(BaseModel):
    talent: TalentPayload
    jobs: List[JobPayload]


class JobMatchResponse(BaseModel):
    matches: List[Dict[str, Any]]


def get_completion_client() -> CompletionClient:
    return build_completion_client()


@router.post("/cultural-fit", response_model=CulturalFitResponse)
async def cultural_fit(
    payload: CulturalFitRequest,
    client: CompletionClient = Depends(get_completion_client),
) -> CulturalFitResponse:
    try:
        analysis = await analyze_cultural_fit(payload.talent_name, payload.bio, payload.transcript, client=client)
    except LendariaException as exc:
        raise map_exception_to_http(exc)
    return CulturalFitResponse(analysis=analysis)


@router.post("/job-match", response_model=JobMatchResponse)
async def job_match(
    payload: JobMatchRequest,
    client: CompletionClient = Depends(get_completion_client),
) -> JobMatchResponse:
    matches: List[JobMatch] = await analyze_job_match(
        payload.talent.model_dump(),
        [job.model_dump() for job in payload.jobs],
        client=client,
    )
    return JobMatchResponse(matches=[match.model_dump(by_alias=True) for match in matches])
