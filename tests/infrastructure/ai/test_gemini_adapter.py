"""Tests for the Gemini adapter."""

import base64
import json

import httpx
import pytest

from aleth.domain.errors import ConfigurationError, UpstreamError
from aleth.domain.ports.model_provider import ContentPart, ModelRequest
from aleth.infrastructure.ai.gemini_adapter import GeminiAdapter, GeminiConfig

GEMINI_BODY = {
    "candidates": [
        {
            "content": {
                "role": "model",
                "parts": [
                    {"text": "```json\n{\"truthScore\": 10}"},
                    {"text": "\n```"},
                ],
            },
            "groundingMetadata": {
                "groundingChunks": [
                    {"web": {"uri": "https://a.example", "title": "a.example"}},
                    {"web": {"uri": "https://b.example"}},
                    {"retrievedContext": {"uri": "gs://bucket/doc"}},
                ]
            },
        }
    ]
}


def make_adapter(handler, **config) -> GeminiAdapter:
    """Create an adapter whose HTTP traffic goes to ``handler``."""
    config = GeminiConfig(api_key="test_key", **config)
    return GeminiAdapter(config=config, transport=httpx.MockTransport(handler))


@pytest.fixture
def sent_requests():
    """Collect requests seen by the mock transport."""
    return []


@pytest.mark.asyncio
async def test_generate_builds_grounded_request(sent_requests):
    """Test the request body carries parts, temperature and the search tool."""

    def handler(request: httpx.Request) -> httpx.Response:
        sent_requests.append(request)
        return httpx.Response(200, json=GEMINI_BODY)

    adapter = make_adapter(handler)
    await adapter.initialize()

    await adapter.generate(ModelRequest(
        parts=[
            ContentPart(text="instructions"),
            ContentPart(inline_data=b"imagebytes", mime_type="image/png"),
            ContentPart(text="Analyze this image"),
        ],
        temperature=0.1,
    ))
    await adapter.shutdown()

    request = sent_requests[0]
    assert request.url.path == "/v1beta/models/gemini-2.5-flash:generateContent"
    assert request.headers["x-goog-api-key"] == "test_key"

    body = json.loads(request.content)
    parts = body["contents"][0]["parts"]
    assert body["contents"][0]["role"] == "user"
    assert parts[0] == {"text": "instructions"}
    assert parts[1]["inlineData"]["mimeType"] == "image/png"
    assert base64.b64decode(parts[1]["inlineData"]["data"]) == b"imagebytes"
    assert parts[2] == {"text": "Analyze this image"}
    assert body["generationConfig"] == {"temperature": 0.1}
    assert body["tools"] == [{"google_search": {}}]


@pytest.mark.asyncio
async def test_grounding_tool_omitted_when_disabled(sent_requests):
    """Test no search tool is requested when grounding is off."""

    def handler(request: httpx.Request) -> httpx.Response:
        sent_requests.append(request)
        return httpx.Response(200, json=GEMINI_BODY)

    adapter = make_adapter(handler)
    await adapter.generate(ModelRequest(parts=[ContentPart(text="x")], enable_grounding=False))

    assert "tools" not in json.loads(sent_requests[0].content)


@pytest.mark.asyncio
async def test_generate_parses_text_and_citations():
    """Test text parts are joined and web citations extracted."""
    adapter = make_adapter(lambda request: httpx.Response(200, json=GEMINI_BODY))
    await adapter.initialize()

    response = await adapter.generate(ModelRequest(parts=[ContentPart(text="x")]))

    assert response.text == "```json\n{\"truthScore\": 10}\n```"
    assert [(c.uri, c.title) for c in response.citations] == [
        ("https://a.example", "a.example"),
        ("https://b.example", None),
    ]


@pytest.mark.asyncio
async def test_empty_candidates_give_empty_text():
    """Test an answer without candidates yields empty text."""
    adapter = make_adapter(lambda request: httpx.Response(200, json={"candidates": []}))

    response = await adapter.generate(ModelRequest(parts=[ContentPart(text="x")]))

    assert response.text == ""
    assert response.citations == []


@pytest.mark.asyncio
async def test_http_error_becomes_upstream_error():
    """Test a non-2xx answer raises UpstreamError with its status."""
    adapter = make_adapter(lambda request: httpx.Response(429, json={"error": {"message": "quota"}}))

    with pytest.raises(UpstreamError) as exc_info:
        await adapter.generate(ModelRequest(parts=[ContentPart(text="x")]))
    assert exc_info.value.status_code == 429


@pytest.mark.asyncio
async def test_timeout_becomes_upstream_error():
    """Test a timed out call raises UpstreamError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    adapter = make_adapter(handler, timeout=5.0)

    with pytest.raises(UpstreamError) as exc_info:
        await adapter.generate(ModelRequest(parts=[ContentPart(text="x")]))
    assert "timed out" in str(exc_info.value)


@pytest.mark.asyncio
async def test_connection_error_becomes_upstream_error():
    """Test transport failures raise UpstreamError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    adapter = make_adapter(handler)

    with pytest.raises(UpstreamError):
        await adapter.generate(ModelRequest(parts=[ContentPart(text="x")]))


@pytest.mark.asyncio
async def test_missing_api_key_is_configuration_error():
    """Test the adapter refuses to start without a key."""
    adapter = GeminiAdapter(config=GeminiConfig(api_key=""))

    with pytest.raises(ConfigurationError):
        await adapter.initialize()
    with pytest.raises(ConfigurationError):
        await adapter.generate(ModelRequest(parts=[ContentPart(text="x")]))
    assert not adapter.is_available


@pytest.mark.asyncio
async def test_provider_properties():
    """Test provider properties and shutdown."""
    adapter = make_adapter(lambda request: httpx.Response(200, json=GEMINI_BODY))
    assert adapter.provider_name == "Gemini"
    assert adapter.capabilities["search_grounding"]

    await adapter.initialize()
    assert adapter.is_available
    await adapter.shutdown()
    assert not adapter.is_available


def test_config_from_env(monkeypatch):
    """Test configuration is read from the environment."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "fallback-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
    monkeypatch.setenv("GEMINI_TIMEOUT", "12.5")

    config = GeminiConfig.from_env()

    assert config.api_key == "fallback-key"
    assert config.model == "gemini-2.5-pro"
    assert config.timeout == 12.5


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        ["unexpected"],
        "just a string",
        {"candidates": "nope"},
        {"candidates": ["not a candidate"]},
    ],
)
async def test_unexpected_body_becomes_upstream_error(body):
    """Test a 200 answer with the wrong shape raises UpstreamError."""
    adapter = make_adapter(lambda request: httpx.Response(200, json=body))

    with pytest.raises(UpstreamError) as exc_info:
        await adapter.generate(ModelRequest(parts=[ContentPart(text="x")]))
    assert "unexpected body" in str(exc_info.value)


@pytest.mark.asyncio
async def test_malformed_candidate_fields_are_ignored():
    """Test odd content and grounding shapes degrade to empty values."""
    body = {
        "candidates": [
            {
                "content": {"parts": [{"text": "ok"}, {"text": 5}, "junk"]},
                "groundingMetadata": {
                    "groundingChunks": [
                        {"web": {"uri": 42, "title": "Numeric uri"}},
                        {"web": "junk"},
                        {"web": {"uri": "https://c.example", "title": "c"}},
                    ]
                },
            }
        ]
    }
    adapter = make_adapter(lambda request: httpx.Response(200, json=body))

    response = await adapter.generate(ModelRequest(parts=[ContentPart(text="x")]))

    assert response.text == "ok"
    assert [(c.uri, c.title) for c in response.citations] == [
        (None, "Numeric uri"),
        ("https://c.example", "c"),
    ]
