import json

import httpx
import pytest

from autoconfig.errors import LabelerError
from autoconfig.labeler import LLMFieldLabeler


def _completion(label):
    content = json.dumps({"label": label})
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def _labeler(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return LLMFieldLabeler(api_key="test-key", client=client)


def test_predict_label():
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        assert request.headers["authorization"] == "Bearer test-key"
        return _completion("title")

    labeler = _labeler(handler)
    assert labeler.predict_label(["Concert A", "Concert B"]) == "title"
    prompt = requests[0]["messages"][1]["content"]
    assert "- Concert A" in prompt
    assert "date-component-day" in prompt


def test_examples_are_capped():
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return _completion("price")

    labeler = _labeler(handler)
    labeler.max_examples = 2
    labeler.predict_label(["1", "2", "3"])
    prompt = requests[0]["messages"][1]["content"]
    assert "- 2" in prompt
    assert "- 3" not in prompt


def test_unknown_label():
    with pytest.raises(LabelerError):
        _labeler(lambda request: _completion("something-else")).predict_label(["x"])


def test_malformed_response():
    handler = lambda request: httpx.Response(200, json={"choices": []})
    with pytest.raises(LabelerError):
        _labeler(handler).predict_label(["x"])


def test_server_error():
    with pytest.raises(LabelerError):
        _labeler(lambda request: httpx.Response(500)).predict_label(["x"])


def test_rate_limit_retry(monkeypatch):
    monkeypatch.setattr("autoconfig.labeler.time.sleep", lambda seconds: None)
    responses = [httpx.Response(429), _completion("location")]
    labeler = _labeler(lambda request: responses.pop(0))
    assert labeler.predict_label(["Zurich"]) == "location"
    assert responses == []


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ValueError):
        LLMFieldLabeler()


def test_close_owned_client():
    labeler = LLMFieldLabeler(api_key="test-key")
    with labeler:
        assert not labeler.client.is_closed
    assert labeler.client.is_closed


def test_close_keeps_injected_client():
    labeler = _labeler(lambda request: _completion("title"))
    labeler.close()
    assert not labeler.client.is_closed
    assert labeler.predict_label(["x"]) == "title"
