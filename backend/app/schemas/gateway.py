"""
BrettAppsCode Backend - AI Gateway Schemas
============================================

What:  The normalized request/response contract of POST /api/gateway.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class GatewayRequest(BaseModel):
    """
    Example:
        {"service": "gemini", "apiKey": "AIza...", "prompt": "hi"}

    `service` is left untyped: any unknown value, strings and non-strings
    alike, must surface as "Invalid service" (400), which GatewayService
    decides.
    """

    service: Any = Field(default=None, description="deepseek, gemini, or copilot")
    api_key: Optional[str] = Field(default=None, alias="apiKey", description="Provider API key")
    prompt: Optional[str] = Field(default=None, description="Sent as the sole user message")
    model: Optional[str] = Field(default=None, description="Provider model id (optional)")

    model_config = {"populate_by_name": True}


class GatewayResponse(BaseModel):
    success: bool = True
    response: str = Field(description="Generated text from the provider")
