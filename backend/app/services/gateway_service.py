"""
BrettAppsCode Backend - AI Gateway Service
============================================

What:  One entry point that forwards a prompt to DeepSeek, Gemini, or OpenAI
       and returns just the generated text.
How:   Look up the provider for `service`, build its request, issue exactly
       one POST through httpx, then extract the text from the reply.
Who:   Called by POST /api/gateway.

Failure mapping (no retries, no partial results):
    unknown service               → InvalidServiceError (400), zero outbound calls
    missing apiKey / prompt       → MissingParametersError (400), zero outbound calls
    timeout / connection failure  → UpstreamError (500)
    non-2xx status                → UpstreamError (500), "<Provider> API error: <reason>"
    non-JSON or missing text      → MalformedUpstreamResponseError (500)
"""

import logging
import time
import uuid
from typing import Any, Mapping, Optional

import httpx

from app.config import settings
from app.exceptions import (
    InvalidServiceError,
    MalformedUpstreamResponseError,
    MissingParametersError,
    UpstreamError,
)
from app.services.llm_base import ChatProvider
from app.services.providers import PROVIDERS, Service

logger = logging.getLogger(__name__)


class GatewayService:
    """
    Stateless dispatcher over the provider registry.

    Each call opens its own httpx.AsyncClient, so no connection or state is
    shared between requests.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        providers: Optional[Mapping[Service, ChatProvider]] = None,
    ):
        """
        Args:
            timeout:   Total seconds allowed for the upstream call
                       (defaults to settings.upstream_timeout).
            providers: Registry override (defaults to PROVIDERS).
        """
        self.timeout = timeout if timeout is not None else settings.upstream_timeout
        self.providers = dict(providers if providers is not None else PROVIDERS)

    def get_provider(self, service: Any) -> ChatProvider:
        """
        Map a raw `service` value onto its provider.

        Raises:
            InvalidServiceError for anything outside the Service enum.
        """
        try:
            key = Service(service)
        except (ValueError, TypeError):
            raise InvalidServiceError(service) from None

        provider = self.providers.get(key)
        if provider is None:
            raise InvalidServiceError(service)
        return provider

    async def complete(
        self,
        service: Any,
        api_key: Optional[str],
        prompt: Optional[str],
        model: Optional[str] = None,
    ) -> str:
        """
        Forward `prompt` to the provider named by `service` and return its reply text.

        Args:
            service: "deepseek", "gemini", or "copilot".
            api_key: Caller's key for that provider. Passed through, never logged.
            prompt:  Sent as the only user message.
            model:   Provider model id; the provider default when empty.

        Raises:
            InvalidServiceError, MissingParametersError, UpstreamError,
            MalformedUpstreamResponseError
        """
        provider = self.get_provider(service)
        if not api_key or prompt is None:
            raise MissingParametersError(
                message="API key and prompt required",
                context={"service": provider.label},
            )

        model = model or provider.default_model
        request = provider.build_request(api_key, prompt, model)

        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()
        logger.info("[%s] Forwarding prompt to %s (model=%s)", call_id, provider.label, model)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    request.url,
                    json=request.body,
                    headers=request.headers,
                    params=request.params,
                )
        except httpx.TimeoutException as e:
            logger.warning("[%s] %s timed out after %.1fs", call_id, provider.label, self.timeout)
            raise UpstreamError(
                message=f"{provider.label} API request timed out",
                provider=provider.label,
                context={"call_id": call_id},
            ) from e
        except httpx.HTTPError as e:
            logger.warning("[%s] %s unreachable: %s", call_id, provider.label, type(e).__name__)
            raise UpstreamError(
                message=f"{provider.label} API request failed",
                provider=provider.label,
                context={"call_id": call_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not response.is_success:
            logger.warning(
                "[%s] %s returned HTTP %d after %.0fms",
                call_id,
                provider.label,
                response.status_code,
                duration_ms,
            )
            raise UpstreamError(
                message=f"{provider.label} API error: {response.reason_phrase}",
                provider=provider.label,
                upstream_status=response.status_code,
                context={"call_id": call_id},
            )

        try:
            text = provider.extract_text(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
            # ValueError: body was not JSON
            logger.error(
                "[%s] %s reply missing generated text: %s",
                call_id,
                provider.label,
                type(e).__name__,
            )
            raise MalformedUpstreamResponseError(
                provider.label,
                context={"call_id": call_id, "error_type": type(e).__name__},
            ) from e

        logger.info(
            "[%s] %s completed in %.0fms, %d chars",
            call_id,
            provider.label,
            duration_ms,
            len(text),
        )
        return text


# ── Singleton Instance ────────────────────────────────────────────────────
gateway_service = GatewayService()


def get_gateway_service() -> GatewayService:
    """FastAPI dependency; tests swap it through app.dependency_overrides."""
    return gateway_service
