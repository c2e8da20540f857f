"""
BrettAppsCode Backend - Chat Provider Interface
=================================================

What:  Abstract base class for one upstream chat-completion protocol.
How:   A provider turns (api_key, prompt, model) into one outbound POST
       description, and pulls the generated text back out of the decoded
       JSON reply. It never performs I/O itself: GatewayService owns the HTTP
       client, the timeout, and the error translation.
Who:   Implemented in app.services.providers; dispatched by GatewayService.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class UpstreamRequest:
    """Everything needed to issue the single POST for one gateway call."""

    url: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)


class ChatProvider(ABC):
    """
    Contract for a chat-completion provider.

    Attributes:
        label:          Human-readable provider name used in error messages
                        ("DeepSeek API error: Unauthorized").
        default_model:  Model identifier used when the caller supplies none.
    """

    label: str = "AI"
    default_model: str = ""

    @abstractmethod
    def build_request(self, api_key: str, prompt: str, model: str) -> UpstreamRequest:
        """
        Describe the outbound POST for `prompt` as the sole user message.

        Auth placement (header or query parameter) is the provider's choice.
        """
        ...

    @abstractmethod
    def extract_text(self, payload: Any) -> str:
        """
        Return the generated text from a decoded JSON reply.

        Raises:
            KeyError / IndexError / TypeError when the expected field path is
            absent or the value is not a string. GatewayService converts these
            into MalformedUpstreamResponseError.
        """
        ...
