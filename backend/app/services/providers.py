"""
BrettAppsCode Backend - Upstream Chat Providers
=================================================

What:  The fixed set of chat-completion APIs the gateway can reach.
How:   `Service` enumerates the accepted `service` values; PROVIDERS maps each
       one to a ChatProvider instance. Adding a provider means adding an enum
       member and a registry entry.

Provider table:
    service    protocol            auth                      default model
    ─────────  ──────────────────  ────────────────────────  ─────────────
    deepseek   chat completions    Authorization: Bearer     deepseek-chat
    gemini     generateContent     ?key=<apiKey>             gemini-pro
    copilot    chat completions    Authorization: Bearer     gpt-4
               (OpenAI endpoint)
"""

from enum import Enum
from typing import Any, Dict
from urllib.parse import quote

from app.services.llm_base import ChatProvider, UpstreamRequest

DEEPSEEK_CHAT_URL = "https://api.deepseek.com/v1/chat/completions"
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
GEMINI_MODELS_URL = "https://generativelanguage.googleapis.com/v1/models"


class Service(str, Enum):
    DEEPSEEK = "deepseek"
    GEMINI = "gemini"
    COPILOT = "copilot"


def _require_text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected text, got {type(value).__name__}")
    return value


class OpenAIChatProvider(ChatProvider):
    """
    OpenAI-style `/chat/completions` endpoint with bearer authentication.

    Request:  {"model": m, "messages": [{"role": "user", "content": prompt}]}
    Reply:    choices[0].message.content
    """

    def __init__(self, label: str, url: str, default_model: str):
        self.label = label
        self.url = url
        self.default_model = default_model

    def build_request(self, api_key: str, prompt: str, model: str) -> UpstreamRequest:
        return UpstreamRequest(
            url=self.url,
            headers={"Authorization": f"Bearer {api_key}"},
            body={
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
            },
        )

    def extract_text(self, payload: Any) -> str:
        return _require_text(payload["choices"][0]["message"]["content"])


class GeminiProvider(ChatProvider):
    """
    Gemini `models/<model>:generateContent` endpoint, key passed as a query parameter.

    Request:  {"contents": [{"parts": [{"text": prompt}]}]}
    Reply:    candidates[0].content.parts[0].text
    """

    label = "Gemini"
    default_model = "gemini-pro"

    def __init__(self, base_url: str = GEMINI_MODELS_URL):
        self.base_url = base_url

    def build_request(self, api_key: str, prompt: str, model: str) -> UpstreamRequest:
        # The model is a path segment here; keep it from adding segments of its own
        return UpstreamRequest(
            url=f"{self.base_url}/{quote(model, safe='')}:generateContent",
            params={"key": api_key},
            body={"contents": [{"parts": [{"text": prompt}]}]},
        )

    def extract_text(self, payload: Any) -> str:
        return _require_text(payload["candidates"][0]["content"]["parts"][0]["text"])


PROVIDERS: Dict[Service, ChatProvider] = {
    Service.DEEPSEEK: OpenAIChatProvider("DeepSeek", DEEPSEEK_CHAT_URL, "deepseek-chat"),
    Service.GEMINI: GeminiProvider(),
    Service.COPILOT: OpenAIChatProvider("OpenAI", OPENAI_CHAT_URL, "gpt-4"),
}
