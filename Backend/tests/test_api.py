import pytest
from fastapi.testclient import TestClient

from lendaria.api.analysis_endpoints import get_completion_client
from lendaria.api.main import app
from lendaria.core.exceptions import ConfigurationError, ExternalAPIError


@pytest.fixture
def api(completion_client):
    app.dependency_overrides[get_completion_client] = lambda: completion_client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def test_health(api):
    response = api.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_voice_config_defaults(api):
    body = api.get("/api/voice/config").json()

    assert body["language"] == "pt-BR"
    assert body["continuous"] is False
    assert body["interim_results"] is False
    assert body["debounce_ms"] == 500


def test_voice_config_reads_environment(api, monkeypatch):
    monkeypatch.setenv("SPEECH_LANGUAGE", "en-US")
    assert api.get("/api/voice/config").json()["language"] == "en-US"


def test_cultural_fit(api, completion_client):
    completion_client.response = "## Relatório"

    response = api.post(
        "/api/analysis/cultural-fit",
        json={"talent_name": "Ana Marques", "bio": "Copywriter", "transcript": "Gosto de IA"},
    )

    assert response.status_code == 200
    assert response.json() == {"analysis": "## Relatório"}
    assert "Ana Marques" in completion_client.prompts[0]


def test_cultural_fit_requires_name(api):
    response = api.post("/api/analysis/cultural-fit", json={"talent_name": ""})
    assert response.status_code == 422


@pytest.mark.parametrize("error", [ConfigurationError("GEMINI_API_KEY não configurada."), ExternalAPIError("quota")])
def test_cultural_fit_unavailable(api, completion_client, error):
    completion_client.error = error

    response = api.post("/api/analysis/cultural-fit", json={"talent_name": "Ana"})

    assert response.status_code == 503
    assert response.headers["retry-after"] == "300"


def test_job_match(api, completion_client):
    completion_client.response = '```json\n[{"jobId": 7, "score": 72, "reason": "Boa base"}]\n```'

    response = api.post(
        "/api/analysis/job-match",
        json={
            "talent": {"role": "Dev", "bio": "Python", "tags": ["python"], "products": []},
            "jobs": [{"id": 7, "title": "Backend", "mission": "APIs", "responsibilities": ["python"]}],
        },
    )

    assert response.status_code == 200
    assert response.json() == {"matches": [{"jobId": "7", "score": 72.0, "reason": "Boa base"}]}


def test_job_match_failure_is_empty(api, completion_client):
    completion_client.error = ExternalAPIError("timeout")

    response = api.post("/api/analysis/job-match", json={"talent": {}, "jobs": []})

    assert response.status_code == 200
    assert response.json() == {"matches": []}
