import json

import httpx
import pytest

from legal_office.core.constants import ANSWER_QUALITY_CHECKLIST
from legal_office.services.ai_client import AIClient, AIError


def make_client(handler, **kwargs):
    kwargs.setdefault("api_key", "test-key")
    kwargs.setdefault("retry_delay", 0)
    kwargs.setdefault("max_retries", 0)
    return AIClient(http_client=httpx.Client(transport=httpx.MockTransport(handler)), **kwargs)


def reply(content="الإجابة"):
    return httpx.Response(200, json={
        "choices": [{"message": {"content": content}}],
        "usage": {"total_tokens": 7},
    })


def test_request_carries_system_prompt_and_settings():
    seen = {}

    def handler(request):
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return reply()

    ai = make_client(handler, default_system_prompt="أنت مساعد", model="glm-4-air")
    result = ai.send_message("سؤال", temperature=0.3, top_p=0.9, max_tokens=100)

    assert result.response == "الإجابة"
    assert result.metadata["tokens"] == 7
    assert result.metadata["model"] == "glm-4-air"
    assert seen["headers"]["Authorization"] == "Bearer test-key"

    body = seen["body"]
    assert body["model"] == "glm-4-air"
    assert body["temperature"] == 0.3
    assert body["top_p"] == 0.9
    assert body["max_tokens"] == 100
    assert body["messages"][0] == {"role": "system", "content": f"أنت مساعد{ANSWER_QUALITY_CHECKLIST}"}
    assert body["messages"][-1] == {"role": "user", "content": "سؤال"}


def test_successful_exchange_is_added_to_history():
    ai = make_client(lambda request: reply("جواب"))
    ai.send_message("سؤال")

    assert ai.conversation_history[1:] == [
        {"role": "user", "content": "سؤال"},
        {"role": "assistant", "content": "جواب"},
    ]

    ai.clear_conversation()
    assert len(ai.conversation_history) == 1


def test_history_is_truncated():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return reply()

    ai = make_client(handler, max_history_length=2)
    ai.load_history([{"role": "user", "content": f"q{i}"} for i in range(5)])
    ai.send_message("latest")

    sent = bodies[0]["messages"]
    assert [m["content"] for m in sent[1:]] == ["q3", "q4", "latest"]


def test_default_prompt_is_prepended_to_user_content():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return reply()

    ai = make_client(handler)
    ai.set_default_prompt("استشهد بالمواد")
    ai.send_message("سؤال")

    assert bodies[0]["messages"][-1]["content"] == "استشهد بالمواد\n\nالمطلوب:\nسؤال"
    # The raw question is what the history keeps
    assert ai.conversation_history[-2]["content"] == "سؤال"


def test_server_errors_are_retried_then_raised():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, json={"message": "busy"})

    ai = make_client(handler, max_retries=2)
    with pytest.raises(AIError) as excinfo:
        ai.send_message("سؤال")

    assert len(calls) == 3
    assert excinfo.value.code == AIError.API_ERROR
    assert excinfo.value.status == 503
    assert excinfo.value.message == "busy"


def test_recovers_after_transient_failure():
    responses = [httpx.Response(429, json={"message": "slow down"}), reply("تم")]

    ai = make_client(lambda request: responses.pop(0), max_retries=1)
    assert ai.send_message("سؤال").response == "تم"


def test_client_errors_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(400, json={"error": {"code": "1210", "message": "bad parameter"}})

    ai = make_client(handler, max_retries=3)
    with pytest.raises(AIError) as excinfo:
        ai.send_message("سؤال")

    assert len(calls) == 1
    assert excinfo.value.code == "1210"
    assert excinfo.value.to_service_error("glm4").status_code == 502


def test_timeout():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(AIError) as excinfo:
        make_client(handler).send_message("سؤال")

    assert excinfo.value.code == AIError.TIMEOUT
    assert excinfo.value.to_service_error("glm4").status_code == 504


def test_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(AIError) as excinfo:
        make_client(handler).send_message("سؤال")
    assert excinfo.value.code == AIError.NETWORK_ERROR


def test_empty_choice_is_an_error():
    ai = make_client(lambda request: httpx.Response(200, json={"choices": []}))
    with pytest.raises(AIError) as excinfo:
        ai.send_message("سؤال")
    assert excinfo.value.code == AIError.EMPTY_RESPONSE
    assert len(ai.conversation_history) == 1


def test_missing_key_is_not_configured():
    ai = make_client(lambda request: reply(), api_key="")
    with pytest.raises(AIError) as excinfo:
        ai.send_message("سؤال")

    assert excinfo.value.code == AIError.NOT_CONFIGURED
    assert excinfo.value.to_service_error("glm4").status_code == 503
