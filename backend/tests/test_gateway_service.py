"""
BrettAppsCode Backend - Gateway Service Unit Tests (Mocked Upstreams)
=======================================================================

What:  Tests for GatewayService dispatch, request shapes, and error mapping.
How:   respx intercepts every outbound httpx request; nothing leaves the box.

What we test:
    ✅ Each provider gets its own URL, body shape, auth placement, default model
    ✅ Unknown service / missing key fail with zero outbound calls
    ✅ Non-2xx, timeout, connection failure → UpstreamError
    ✅ Non-JSON or missing text field → MalformedUpstreamResponseError
"""

import json

import httpx
import pytest
from respx import MockRouter

from app.exceptions import (
    InvalidServiceError,
    MalformedUpstreamResponseError,
    MissingParametersError,
    UpstreamError,
)
from app.services.providers import (
    DEEPSEEK_CHAT_URL,
    OPENAI_CHAT_URL,
    PROVIDERS,
    GeminiProvider,
    Service,
)

GEMINI_HOST = "generativelanguage.googleapis.com"


def chat_reply(text):
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestProviderRegistry:

    def test_every_service_has_a_provider(self):
        assert set(PROVIDERS) == set(Service)

    def test_default_models(self):
        assert PROVIDERS[Service.DEEPSEEK].default_model == "deepseek-chat"
        assert PROVIDERS[Service.GEMINI].default_model == "gemini-pro"
        assert PROVIDERS[Service.COPILOT].default_model == "gpt-4"

    @pytest.mark.parametrize("service", ["openai", "DeepSeek", "", None, "gemini "])
    def test_unknown_service_rejected(self, gateway, service):
        with pytest.raises(InvalidServiceError, match="Invalid service"):
            gateway.get_provider(service)

    def test_gemini_model_cannot_add_path_segments(self):
        request = GeminiProvider().build_request("k", "hi", "../../v1beta/models/other")
        assert request.url.endswith("/v1/models/..%2F..%2Fv1beta%2Fmodels%2Fother:generateContent")


class TestDispatch:

    @pytest.mark.asyncio
    async def test_deepseek_request_shape(self, gateway, respx_mock: MockRouter):
        route = respx_mock.post(DEEPSEEK_CHAT_URL).mock(
            return_value=httpx.Response(200, json=chat_reply("from deepseek"))
        )

        text = await gateway.complete("deepseek", "sk-test", "hello there")

        assert text == "from deepseek"
        assert route.call_count == 1
        sent = route.calls.last.request
        assert sent.headers["Authorization"] == "Bearer sk-test"
        assert sent.headers["Content-Type"] == "application/json"
        assert json.loads(sent.content) == {
            "model": "deepseek-chat",
            "messages": [{"role": "user", "content": "hello there"}],
        }

    @pytest.mark.asyncio
    async def test_copilot_goes_to_openai_with_explicit_model(self, gateway, respx_mock: MockRouter):
        route = respx_mock.post(OPENAI_CHAT_URL).mock(
            return_value=httpx.Response(200, json=chat_reply("from openai"))
        )

        text = await gateway.complete("copilot", "sk-openai", "write a loop", model="gpt-4o-mini")

        assert text == "from openai"
        body = json.loads(route.calls.last.request.content)
        assert body["model"] == "gpt-4o-mini"
        assert route.calls.last.request.headers["Authorization"] == "Bearer sk-openai"

    @pytest.mark.asyncio
    async def test_gemini_key_in_query_not_header(self, gateway, respx_mock: MockRouter):
        route = respx_mock.post(
            host=GEMINI_HOST, path="/v1/models/gemini-pro:generateContent"
        ).mock(return_value=httpx.Response(200, json=gemini_reply("hello")))

        text = await gateway.complete("gemini", "AIza-test", "hi")

        assert text == "hello"
        sent = route.calls.last.request
        assert sent.url.params["key"] == "AIza-test"
        assert "Authorization" not in sent.headers
        assert json.loads(sent.content) == {"contents": [{"parts": [{"text": "hi"}]}]}

    @pytest.mark.asyncio
    async def test_empty_model_falls_back_to_default(self, gateway, respx_mock: MockRouter):
        route = respx_mock.post(
            host=GEMINI_HOST, path="/v1/models/gemini-pro:generateContent"
        ).mock(return_value=httpx.Response(200, json=gemini_reply("ok")))

        await gateway.complete("gemini", "k", "hi", model="")
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_empty_prompt_is_forwarded(self, gateway, respx_mock: MockRouter):
        route = respx_mock.post(DEEPSEEK_CHAT_URL).mock(
            return_value=httpx.Response(200, json=chat_reply(""))
        )

        assert await gateway.complete("deepseek", "k", "") == ""
        assert route.call_count == 1


class TestNoOutboundCall:

    @pytest.mark.asyncio
    async def test_invalid_service(self, gateway, respx_mock: MockRouter):
        with pytest.raises(InvalidServiceError):
            await gateway.complete("claude", "k", "hi")
        assert len(respx_mock.calls) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("api_key, prompt", [(None, "hi"), ("", "hi"), ("k", None)])
    async def test_missing_parameters(self, gateway, respx_mock: MockRouter, api_key, prompt):
        with pytest.raises(MissingParametersError, match="API key and prompt required"):
            await gateway.complete("gemini", api_key, prompt)
        assert len(respx_mock.calls) == 0


class TestUpstreamFailures:

    @pytest.mark.asyncio
    async def test_server_error_status(self, gateway, respx_mock: MockRouter):
        route = respx_mock.post(DEEPSEEK_CHAT_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(UpstreamError) as exc_info:
            await gateway.complete("deepseek", "k", "hi")

        assert exc_info.value.message == "DeepSeek API error: Internal Server Error"
        assert exc_info.value.upstream_status == 500
        assert route.call_count == 1  # never retried

    @pytest.mark.asyncio
    async def test_unauthorized_status(self, gateway, respx_mock: MockRouter):
        respx_mock.post(OPENAI_CHAT_URL).mock(
            return_value=httpx.Response(401, json={"error": {"message": "bad key"}})
        )

        with pytest.raises(UpstreamError, match="OpenAI API error: Unauthorized"):
            await gateway.complete("copilot", "wrong", "hi")

    @pytest.mark.asyncio
    async def test_timeout(self, gateway, respx_mock: MockRouter):
        respx_mock.post(DEEPSEEK_CHAT_URL).mock(side_effect=httpx.ReadTimeout)

        with pytest.raises(UpstreamError, match="DeepSeek API request timed out"):
            await gateway.complete("deepseek", "k", "hi")

    @pytest.mark.asyncio
    async def test_connection_failure(self, gateway, respx_mock: MockRouter):
        respx_mock.post(host=GEMINI_HOST).mock(side_effect=httpx.ConnectError)

        with pytest.raises(UpstreamError, match="Gemini API request failed"):
            await gateway.complete("gemini", "k", "hi")


class TestMalformedReplies:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": None}}]},
            ["not", "an", "object"],
        ],
    )
    async def test_chat_reply_missing_text(self, gateway, respx_mock: MockRouter, payload):
        respx_mock.post(DEEPSEEK_CHAT_URL).mock(return_value=httpx.Response(200, json=payload))

        with pytest.raises(MalformedUpstreamResponseError, match="Malformed response from DeepSeek API"):
            await gateway.complete("deepseek", "k", "hi")

    @pytest.mark.asyncio
    async def test_gemini_reply_missing_parts(self, gateway, respx_mock: MockRouter):
        respx_mock.post(host=GEMINI_HOST).mock(
            return_value=httpx.Response(200, json={"candidates": [{"content": {}}]})
        )

        with pytest.raises(MalformedUpstreamResponseError, match="Gemini"):
            await gateway.complete("gemini", "k", "hi")

    @pytest.mark.asyncio
    async def test_non_json_body(self, gateway, respx_mock: MockRouter):
        respx_mock.post(OPENAI_CHAT_URL).mock(
            return_value=httpx.Response(200, text="<html>gateway page</html>")
        )

        with pytest.raises(MalformedUpstreamResponseError, match="OpenAI"):
            await gateway.complete("copilot", "k", "hi")
