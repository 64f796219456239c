import json

import pytest

from lendaria.application.analysis import (
    analyze_cultural_fit,
    analyze_job_match,
    build_cultural_fit_prompt,
    build_job_match_prompt,
    parse_job_matches,
    strip_code_fences,
)
from lendaria.core.exceptions import ConfigurationError, ExternalAPIError, ValidationError

TALENT = {
    "role": "Engenheira de Dados",
    "bio": "Constrói pipelines.",
    "tags": ["python", "spark"],
    "products": ["Lakehouse"],
}
JOBS = [
    {"id": "job-1", "title": "Data Lead", "mission": "Escalar dados", "responsibilities": ["spark", "liderança"]},
    {"id": 2, "title": "Backend", "mission": "APIs", "responsibilities": ["python"]},
]


def test_strip_code_fences():
    assert strip_code_fences('```json\n[{"a": 1}]\n```') == '[{"a": 1}]'
    assert strip_code_fences(None) == ""


def test_cultural_fit_prompt_contains_inputs():
    prompt = build_cultural_fit_prompt("Ana Marques", "Bio curta", "Transcrição da entrevista")

    assert "Ana Marques" in prompt
    assert "Bio curta" in prompt
    assert "Transcrição da entrevista" in prompt


def test_job_match_prompt_serializes_talent_and_jobs():
    prompt = build_job_match_prompt(TALENT, JOBS)

    assert json.dumps(["python", "spark"]) in prompt
    assert '"skills": ["spark", "liderança"]' in prompt
    assert '"id": 2' in prompt


def test_parse_job_matches_accepts_fenced_array():
    text = '```json\n[{"jobId": "job-1", "score": 87, "reason": "Forte em dados"}, {"jobId": 2, "score": 40, "reason": "Pouco backend"}]\n```'

    matches = parse_job_matches(text)

    assert [m.job_id for m in matches] == ["job-1", "2"]
    assert matches[0].score == 87
    assert matches[0].model_dump(by_alias=True)["jobId"] == "job-1"


def test_parse_job_matches_skips_invalid_entries():
    text = '[{"jobId": "a", "score": 150}, {"score": 10}, {"jobId": "b", "score": 10, "reason": "ok"}]'
    assert [m.job_id for m in parse_job_matches(text)] == ["b"]


@pytest.mark.parametrize("text", ["não é json", '{"jobId": "a"}'])
def test_parse_job_matches_rejects_non_arrays(text):
    with pytest.raises(ValidationError):
        parse_job_matches(text)


@pytest.mark.asyncio
async def test_cultural_fit_returns_model_text(completion_client):
    completion_client.response = "## Aderência alta"

    report = await analyze_cultural_fit("Ana", "bio", "transcrição", client=completion_client)

    assert report == "## Aderência alta"
    assert "Ana" in completion_client.prompts[0]


@pytest.mark.asyncio
async def test_cultural_fit_propagates_failures(completion_client):
    completion_client.error = ExternalAPIError("quota")
    with pytest.raises(ExternalAPIError):
        await analyze_cultural_fit("Ana", "bio", "transcrição", client=completion_client)


@pytest.mark.asyncio
async def test_cultural_fit_without_credentials():
    with pytest.raises(ConfigurationError):
        await analyze_cultural_fit("Ana", "bio", "transcrição")


@pytest.mark.asyncio
async def test_job_match_returns_scores(completion_client):
    completion_client.response = '[{"jobId": "job-1", "score": 90, "reason": "Spark"}]'

    matches = await analyze_job_match(TALENT, JOBS, client=completion_client)

    assert len(matches) == 1
    assert matches[0].job_id == "job-1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response, error",
    [
        ("isto não é json", None),
        ("", ExternalAPIError("timeout")),
        ('{"jobId": "job-1"}', None),
    ],
)
async def test_job_match_failures_yield_empty_list(completion_client, response, error):
    completion_client.response = response
    completion_client.error = error

    assert await analyze_job_match(TALENT, JOBS, client=completion_client) == []


@pytest.mark.asyncio
async def test_job_match_without_credentials_is_empty():
    assert await analyze_job_match(TALENT, JOBS) == []
