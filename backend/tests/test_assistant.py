import json
from datetime import datetime, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from legal_office.core import messages
from legal_office.core.constants import LEGAL_TEMPLATES
from legal_office.main import app
from legal_office.models import AISettings
from legal_office.services import assistant_service
from legal_office.services.ai_client import AIClient

client = TestClient(app)

REPLY = "مذكرة بالرأي القانوني\nالمادة 374 من القانون المدني\nملاحظة هامة: راجع المواعيد"


def completion(content=REPLY, tokens=42):
    return {"choices": [{"message": {"role": "assistant", "content": content}}], "usage": {"total_tokens": tokens}}


@pytest.fixture
def provider(monkeypatch):
    """Serve chat completions from an in-memory transport and record every request body."""
    state = {"requests": [], "handler": lambda request: httpx.Response(200, json=completion())}

    def transport(request):
        state["requests"].append(json.loads(request.content))
        return state["handler"](request)

    def factory(settings, api_key):
        return AIClient(
            model=settings.model,
            api_key="test-key",
            default_system_prompt=settings.system_prompt,
            max_retries=0,
            retry_delay=0,
            http_client=httpx.Client(transport=httpx.MockTransport(transport)),
        )

    monkeypatch.setattr(assistant_service, "build_ai_client", factory)
    return state


def set_mode(admin_headers, mode):
    response = client.put("/api/assistant/settings", json={"ai_mode": mode}, headers=admin_headers)
    assert response.status_code == 200, response.text


def test_send_message_stores_both_turns(provider, lawyer, lawyer_headers):
    response = client.post("/api/assistant/messages", json={"content": "  ما مدة التقادم؟  "}, headers=lawyer_headers)
    assert response.status_code == 201

    exchange = response.json()["data"]
    assert exchange["user_message"]["content"] == "ما مدة التقادم؟"
    assert exchange["user_message"]["sender"] == "user"
    assert exchange["ai_message"]["sender"] == "ai"
    assert exchange["ai_message"]["content"] == REPLY
    assert exchange["ai_message"]["error"] is False
    assert exchange["ai_message"]["metadata"]["tokens"] == 42
    assert [block["type"] for block in exchange["ai_message"]["formatted_content"]] == ["title", "article", "section"]

    history = client.get("/api/assistant/messages", headers=lawyer_headers).json()["data"]
    assert [m["sender"] for m in history] == ["user", "ai"]
    assert all(m["user_id"] == lawyer.id for m in history)


def test_history_and_default_prompt_are_sent(provider, lawyer_headers, admin_headers):
    client.post("/api/prompts", json={"content": "أجب بإيجاز", "is_default": True}, headers=admin_headers)

    client.post("/api/assistant/messages", json={"content": "السؤال الأول"}, headers=lawyer_headers)
    client.post("/api/assistant/messages", json={"content": "السؤال الثاني"}, headers=lawyer_headers)

    sent = provider["requests"][-1]["messages"]
    assert sent[0]["role"] == "system"
    assert {"role": "user", "content": "السؤال الأول"} in sent
    assert {"role": "assistant", "content": REPLY} in sent
    assert sent[-1]["role"] == "user"
    assert sent[-1]["content"].startswith("أجب بإيجاز")
    assert sent[-1]["content"].endswith("السؤال الثاني")


def test_conversations_are_private(provider, lawyer_headers, other_headers):
    client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers)

    assert client.get("/api/assistant/messages", headers=other_headers).json()["data"] == []


def test_empty_message_is_rejected(provider, lawyer_headers):
    response = client.post("/api/assistant/messages", json={"content": "   "}, headers=lawyer_headers)
    assert response.status_code == 422
    assert response.json()["data"]["message"] == messages.EMPTY_MESSAGE
    assert client.get("/api/assistant/messages", headers=lawyer_headers).json()["data"] == []


def test_missing_key_is_reported_and_recorded(lawyer_headers):
    response = client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers)
    assert response.status_code == 503
    assert response.json()["data"]["message"] == messages.AI_NOT_CONFIGURED

    history = client.get("/api/assistant/messages", headers=lawyer_headers).json()["data"]
    assert [(m["sender"], m["error"]) for m in history] == [("user", False), ("ai", True)]


def test_provider_error_becomes_bad_gateway(provider, lawyer_headers):
    provider["handler"] = lambda request: httpx.Response(500, json={"error": {"code": "1234", "message": "boom"}})

    response = client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers)
    assert response.status_code == 502
    assert response.json()["data"]["message"] == "boom"
    assert response.json()["data"]["details"]["code"] == "1234"

    history = client.get("/api/assistant/messages", headers=lawyer_headers).json()["data"]
    assert history[-1]["error"] is True
    assert history[-1]["content"] == "boom"


def test_failed_turns_are_not_sent_as_history(provider, lawyer_headers):
    provider["handler"] = lambda request: httpx.Response(500, json={"message": "boom"})
    client.post("/api/assistant/messages", json={"content": "الأول"}, headers=lawyer_headers)

    provider["handler"] = lambda request: httpx.Response(200, json=completion())
    client.post("/api/assistant/messages", json={"content": "الثاني"}, headers=lawyer_headers)

    contents = [m["content"] for m in provider["requests"][-1]["messages"]]
    assert "boom" not in contents


def test_timeout_becomes_gateway_timeout(provider, lawyer_headers):
    def slow(request):
        raise httpx.ReadTimeout("too slow", request=request)

    provider["handler"] = slow
    response = client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers)
    assert response.status_code == 504
    assert response.json()["data"]["message"] == messages.AI_TIMEOUT


def test_template_is_used_as_system_prompt(provider, lawyer_headers):
    response = client.post("/api/assistant/templates/defense_memo", json={"content": "اكتب مذكرة"},
                           headers=lawyer_headers)
    assert response.status_code == 201
    assert provider["requests"][-1]["messages"][0]["content"] == LEGAL_TEMPLATES["DEFENSE_MEMO"]

    unknown = client.post("/api/assistant/templates/poetry", json={"content": "x"}, headers=lawyer_headers)
    assert unknown.status_code == 404


def test_templates_and_models_are_listed(lawyer_headers):
    templates = client.get("/api/assistant/templates", headers=lawyer_headers).json()["data"]
    assert set(templates) == set(LEGAL_TEMPLATES)

    models = client.get("/api/assistant/models", headers=lawyer_headers).json()["data"]
    assert models["GLM_4_0520"] == "glm-4-0520"


def test_gemini_mode(monkeypatch, lawyer_headers, admin_headers):
    prompts = []

    def fake_gemini(prompt, api_key=None):
        prompts.append(prompt)
        return "رد من Gemini"

    monkeypatch.setattr(assistant_service, "send_to_gemini", fake_gemini)
    set_mode(admin_headers, "gemini")

    response = client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers)
    assert response.status_code == 201
    assert response.json()["data"]["ai_message"]["content"] == "رد من Gemini"
    assert prompts == ["سؤال"]

    client.post("/api/assistant/templates/legal_analysis", json={"content": "حلل"}, headers=lawyer_headers)
    assert prompts[-1] == f"{LEGAL_TEMPLATES['LEGAL_ANALYSIS']}\n\nحلل"


def test_predefined_mode(lawyer_headers, admin_headers):
    set_mode(admin_headers, "predefined")

    empty = client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers)
    assert empty.status_code == 503
    assert empty.json()["data"]["message"] == messages.NO_PREDEFINED_RESPONSES

    expired = (datetime.utcnow() - timedelta(days=1)).isoformat()
    client.post("/api/assistant/predefined-responses", json={"response": "رد قديم", "valid_until": expired},
                headers=admin_headers)
    created = client.post("/api/assistant/predefined-responses", json={"response": "رد جاهز", "processing_time": 2},
                          headers=admin_headers)
    assert created.status_code == 201

    response = client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers)
    assert response.status_code == 201
    ai_message = response.json()["data"]["ai_message"]
    assert ai_message["content"] == "رد جاهز"
    assert ai_message["metadata"]["processing_time"] == 2


def test_predefined_responses_admin_crud(lawyer_headers, admin_headers):
    assert client.get("/api/assistant/predefined-responses", headers=lawyer_headers).status_code == 403

    created = client.post("/api/assistant/predefined-responses",
                          json={"response": "رد", "valid_until": "2030-01-01T00:00:00"},
                          headers=admin_headers).json()["data"]
    assert created["valid_until"] == "2030-01-01T00:00:00"

    updated = client.put(f"/api/assistant/predefined-responses/{created['id']}", json={"valid_until": None},
                         headers=admin_headers).json()["data"]
    assert updated["valid_until"] is None
    assert updated["response"] == "رد"

    assert client.delete(f"/api/assistant/predefined-responses/{created['id']}",
                         headers=admin_headers).status_code == 200
    assert client.get("/api/assistant/predefined-responses", headers=admin_headers).json()["data"] == []


def test_feedback(provider, lawyer_headers, other_headers):
    exchange = client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers).json()["data"]
    message_id = exchange["ai_message"]["id"]
    url = f"/api/assistant/messages/{message_id}/feedback"

    missing = client.post(url, json={"is_correct": False, "correction": "  "}, headers=lawyer_headers)
    assert missing.status_code == 422
    assert missing.json()["data"]["message"] == messages.CORRECTION_REQUIRED

    saved = client.post(url, json={"is_correct": False, "correction": "المدة 15 سنة"}, headers=lawyer_headers)
    assert saved.status_code == 200
    assert saved.json()["data"]["feedback"] == {"is_correct": False, "correction": "المدة 15 سنة"}

    assert client.post(url, json={"is_correct": True}, headers=other_headers).status_code == 404


def test_clear_messages(provider, lawyer_headers):
    client.post("/api/assistant/messages", json={"content": "سؤال"}, headers=lawyer_headers)

    response = client.delete("/api/assistant/messages", headers=lawyer_headers)
    assert response.json()["data"] == {"deleted": 2}
    assert client.get("/api/assistant/messages", headers=lawyer_headers).json()["data"] == []


def test_settings_keep_keys_encrypted(db, lawyer_headers, admin_headers):
    assert client.get("/api/assistant/settings", headers=lawyer_headers).status_code == 403

    settings = client.get("/api/assistant/settings", headers=admin_headers).json()["data"]
    assert settings["ai_mode"] == "glm4"
    assert settings["has_glm_api_key"] is False

    updated = client.put("/api/assistant/settings", json={"glm_api_key": "secret-glm", "temperature": 0.2},
                         headers=admin_headers).json()["data"]
    assert updated["has_glm_api_key"] is True
    assert updated["temperature"] == 0.2
    assert "glm_api_key" not in updated

    stored = db.query(AISettings).first()
    assert stored.encrypted_glm_api_key
    assert stored.encrypted_glm_api_key != "secret-glm"

    cleared = client.put("/api/assistant/settings", json={"glm_api_key": ""}, headers=admin_headers).json()["data"]
    assert cleared["has_glm_api_key"] is False


def test_settings_are_validated(admin_headers):
    response = client.put("/api/assistant/settings", json={"ai_mode": "gpt", "temperature": 5}, headers=admin_headers)
    assert response.status_code == 422
