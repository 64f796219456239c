"""Cultural-fit and job-match analysis over a remote completion service."""
from __future__ import annotations

import json
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from lendaria.application.analysis.prompts import COMPANY_NAME, CULTURAL_FIT_PROMPT, JOB_MATCH_PROMPT
from lendaria.core.exceptions import ValidationError
from lendaria.core.logging import get_logger
from lendaria.infrastructure.ai import CompletionClient, build_completion_client

logger = get_logger(__name__)


class JobMatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    job_id: str = Field(alias="jobId")
    score: float = Field(ge=0, le=100)
    reason: str = ""


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers wrapping a model response."""
    return (text or "").replace("```json", "").replace("```", "").strip()


def parse_job_matches(text: str) -> List[JobMatch]:
    """Parse the model's JSON array; raises ``ValidationError`` when it is not one."""
    cleaned = strip_code_fences(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ValidationError("Resposta do modelo não é JSON válido", {"position": exc.pos}) from exc
    if not isinstance(payload, list):
        raise ValidationError("Resposta do modelo não é um array JSON", {"type": type(payload).__name__})

    matches: List[JobMatch] = []
    for entry in payload:
        try:
            matches.append(JobMatch.model_validate(entry))
        except PydanticValidationError as exc:
            logger.warning({"event": "job_match_entry_skipped", "error": str(exc)})
    return matches


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def serialize_talent(talent: Any) -> str:
    return json.dumps(
        {
            "role": _field(talent, "role"),
            "bio": _field(talent, "bio"),
            "skills": _field(talent, "tags"),
            "products": _field(talent, "products"),
        },
        ensure_ascii=False,
    )


def serialize_jobs(jobs: Iterable[Any]) -> str:
    return json.dumps(
        [
            {
                "id": _field(job, "id"),
                "title": _field(job, "title"),
                "mission": _field(job, "mission"),
                "skills": _field(job, "responsibilities"),
            }
            for job in jobs
        ],
        ensure_ascii=False,
    )


def build_cultural_fit_prompt(talent_name: str, bio: str, transcript: str) -> str:
    return CULTURAL_FIT_PROMPT.format(
        company=COMPANY_NAME,
        talent_name=talent_name,
        bio=bio,
        transcript=transcript,
    )


def build_job_match_prompt(talent: Any, jobs: Iterable[Any]) -> str:
    return JOB_MATCH_PROMPT.format(talent_data=serialize_talent(talent), jobs_data=serialize_jobs(jobs))


async def analyze_cultural_fit(
    talent_name: str,
    bio: str,
    transcript: str,
    *,
    client: Optional[CompletionClient] = None,
) -> str:
    """Return the markdown cultural-fit report for a candidate.

    Missing credentials and provider failures are logged and re-raised.
    """
    client = client or build_completion_client()
    prompt = build_cultural_fit_prompt(talent_name, bio, transcript)
    try:
        return await client.complete(prompt)
    except Exception as exc:
        logger.error({"event": "cultural_fit_analysis_failed", "talent": talent_name, "error": str(exc)})
        raise


async def analyze_job_match(
    talent: Any,
    jobs: Iterable[Any],
    *,
    client: Optional[CompletionClient] = None,
) -> List[JobMatch]:
    """Score a candidate against each job. Any failure yields an empty list."""
    jobs = list(jobs)
    try:
        client = client or build_completion_client()
        text = await client.complete(build_job_match_prompt(talent, jobs))
        return parse_job_matches(text)
    except Exception as exc:  # noqa: BLE001 - matching is best effort
        logger.error({"event": "job_match_analysis_failed", "jobs": len(jobs), "error": str(exc)})
        return []
