"""
BrettAppsCode Backend - AI Gateway Route Handler
==================================================

What:  POST /api/gateway, the editor's single door to the AI providers.
How:   Validates the body shape, hands it to GatewayService, wraps the text
       in the normalized envelope. InvalidServiceError (400) and the
       GatewayError family (500) are turned into {"success": false, "error"}
       by the global handlers.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.schemas.common import ErrorResponse
from app.schemas.gateway import GatewayRequest, GatewayResponse
from app.services.gateway_service import GatewayService, get_gateway_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["AI Gateway"])


@router.post(
    "/gateway",
    response_model=GatewayResponse,
    responses={
        400: {"description": "Invalid service or missing parameters", "model": ErrorResponse},
        500: {"description": "Upstream provider failed", "model": ErrorResponse},
    },
    summary="Send a prompt to an AI provider",
    description=(
        "Forwards `prompt` to DeepSeek (`deepseek`), Gemini (`gemini`) or OpenAI "
        "(`copilot`) using the caller's `apiKey`, and returns the generated text."
    ),
)
async def gateway(
    payload: Optional[GatewayRequest] = None,
    gateway_service: GatewayService = Depends(get_gateway_service),
) -> GatewayResponse:
    payload = payload or GatewayRequest()
    text = await gateway_service.complete(
        service=payload.service,
        api_key=payload.api_key,
        prompt=payload.prompt,
        model=payload.model,
    )
    return GatewayResponse(response=text)
