import asyncio

import pytest
from fastapi.testclient import TestClient

from subtrans.api.dependencies import get_cache_store, get_pipeline_controller, settings
from subtrans.core.translation.models import ContentKey, Progress, TranslationJob
from subtrans.main import app

from fakes import FakeGateway, fake_translate, make_controller, make_vtt

CUES = ["안녕하세요", "어디 가요?", "집에 가요", "같이 가요", "좋아요", "내일 봐요", "잘 자요"]
KEY = ContentKey(content_id="show-42", source_lang="ko", target_lang="uk")
SESSION_PATH = "/api/v1/translation/session/show-42/ko/uk"


@pytest.fixture
def api(store):
    gateway = FakeGateway()
    controller, _ = make_controller(store, gateway)
    app.dependency_overrides[get_cache_store] = lambda: store
    app.dependency_overrides[get_pipeline_controller] = lambda: controller
    with TestClient(app) as client:
        yield client, controller, gateway, store
    app.dependency_overrides.clear()


def start(client, **overrides):
    payload = {"content_id": "show-42", "source_lang": "ko", "target_lang": "uk", "document": make_vtt(CUES)}
    payload.update(overrides)
    return client.post("/api/v1/translation/start", json=payload)


def test_root_and_health(api) -> None:
    client, *_ = api

    assert client.get("/").status_code == 200
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_start_runs_job_and_exposes_results(api) -> None:
    client, _, gateway, _ = api

    response = start(client)

    assert response.status_code == 200
    body = response.json()
    assert body["session_id"] == KEY.cache_key
    assert body["status"] == "loading"
    assert body["reattached"] is False
    assert len(gateway.calls) == 2

    session = client.get(SESSION_PATH).json()
    assert session["status"] == "ready"
    assert session["completed"] is True
    assert (session["current"], session["total"], session["percent"]) == (7, 7, 100)

    translations = client.get(f"{SESSION_PATH}/translations").json()["translations"]
    assert translations == {text: fake_translate(text) for text in CUES}


def test_start_defaults_target_language(api) -> None:
    client, *_ = api

    body = start(client, target_lang=None).json()

    assert body["target_lang"] == settings.default_target_language


def test_start_requires_a_source(api) -> None:
    client, *_ = api

    response = start(client, document=None)

    assert response.status_code == 400


def test_start_while_loading_reattaches(api) -> None:
    client, controller, gateway, _ = api
    running, _ = controller.prepare(TranslationJob(key=KEY, document=make_vtt(CUES)))

    body = start(client).json()

    assert body["reattached"] is True
    assert body["status"] == "loading"
    assert gateway.calls == []
    assert controller.get_session(KEY) is running


def test_session_falls_back_to_cache_record(api) -> None:
    client, _, _, store = api
    asyncio.run(store.merge(KEY, {"안녕하세요": "Добрий день"}, Progress(current=5, total=7)))

    session = client.get(SESSION_PATH).json()

    assert session["status"] == "idle"
    assert session["current"] == 5
    assert session["total"] == 7
    assert session["translated_count"] == 1
    assert session["completed"] is False


def test_translations_for_unknown_content_is_404(api) -> None:
    client, *_ = api

    assert client.get("/api/v1/translation/session/nothing/ko/uk/translations").status_code == 404


def test_lookup_and_cache_status(api) -> None:
    client, *_ = api
    start(client)
    params = {"content_id": "show-42", "source_lang": "ko", "target_lang": "uk"}

    found = client.get("/api/v1/translation/lookup", params={**params, "text": "좋아요"}).json()
    missing = client.get("/api/v1/translation/lookup", params={**params, "text": "좋아"}).json()
    status = client.get("/api/v1/cache/status", params=params).json()
    other = client.get("/api/v1/cache/status", params={**params, "target_lang": "en"}).json()

    assert found == {"text": "좋아요", "found": True, "translation": fake_translate("좋아요")}
    assert missing["found"] is False
    assert status == {"exists": True, "percent_complete": 100, "completed": True, "current": 7, "total": 7}
    assert other["exists"] is False


def test_cancel_flags_active_sessions(api) -> None:
    client, controller, _, _ = api
    running, _ = controller.prepare(TranslationJob(key=KEY, document=make_vtt(CUES)))

    response = client.post("/api/v1/translation/cancel")

    assert response.json() == {"cancelled": 1}
    assert running.cancelled is True


def test_languages(api) -> None:
    client, *_ = api

    body = client.get("/api/v1/translation/languages").json()

    assert {"code": "ko", "name": "Korean"} in body["languages"]
    assert body["default_target"] == "uk"


def test_cache_records_delete_and_clear(api) -> None:
    client, *_ = api
    start(client)
    start(client, content_id="show-43")

    records = client.get("/api/v1/cache/records").json()
    assert {r["content_id"] for r in records} == {"show-42", "show-43"}
    assert all(r["entries"] == 7 and r["completed"] for r in records)

    assert client.delete("/api/v1/cache/show-42/ko/uk").status_code == 200
    assert client.delete("/api/v1/cache/show-42/ko/uk").status_code == 404

    cleared = client.post("/api/v1/cache/clear").json()
    assert cleared == {"entries_deleted": 1, "action": "clear_all"}
    assert client.get("/api/v1/cache/records").json() == []


def test_deleted_record_is_no_longer_served(api) -> None:
    client, controller, _, _ = api
    start(client)
    assert client.get(f"{SESSION_PATH}/translations").status_code == 200

    assert client.delete("/api/v1/cache/show-42/ko/uk").status_code == 200

    assert controller.get_session(KEY) is None
    assert client.get(f"{SESSION_PATH}/translations").status_code == 404
    session = client.get(SESSION_PATH).json()
    assert session["status"] == "idle"
    assert session["translated_count"] == 0
    assert session["completed"] is False


def test_clear_drops_settled_sessions(api) -> None:
    client, controller, _, _ = api
    start(client)
    start(client, content_id="show-43")

    client.post("/api/v1/cache/clear")

    assert controller.registry.all() == []
    assert client.get(f"{SESSION_PATH}/translations").status_code == 404
    assert client.get("/api/v1/translation/session/show-43/ko/uk/translations").status_code == 404


def test_mutating_endpoints_require_token_when_configured(api, monkeypatch) -> None:
    client, *_ = api
    monkeypatch.setattr(settings, "api_auth_token", "s3cret")

    assert client.post("/api/v1/translation/cancel").status_code == 401
    assert client.post(
        "/api/v1/translation/cancel", headers={"Authorization": "Bearer wrong"}
    ).status_code == 401
    assert client.post(
        "/api/v1/translation/cancel", headers={"Authorization": "Bearer s3cret"}
    ).status_code == 200
    assert client.post("/api/v1/translation/cancel", headers={"X-API-Key": "s3cret"}).status_code == 200
    # Reads stay open unless require_auth_all is set
    assert client.get("/api/v1/translation/languages").status_code == 200
