"""AI gateway relay endpoints used by the mobile app."""

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from gains_api.services.gateways.claude import claude_gateway
from gains_api.services.gateways.perplexity import perplexity_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])


# ─────────────────────────────────────────────────────────────────────────────
# Request/Response Schemas
# ─────────────────────────────────────────────────────────────────────────────


class ClaudeRequest(BaseModel):
    """Image analysis request: base64 JPEG plus prompts."""

    model_config = ConfigDict(populate_by_name=True)

    image: str
    prompt: str
    system_prompt: str = Field(default="", alias="systemPrompt")


class PerplexityRequest(BaseModel):
    """Chat request; messages are forwarded to Perplexity untouched."""

    messages: list[dict[str, Any]]


class ContentResponse(BaseModel):
    content: str


# ─────────────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────────────


@router.post("/claude", response_model=ContentResponse)
async def analyze_image(request: ClaudeRequest) -> ContentResponse:
    """
    Relay an image + prompt to Claude.

    Upstream errors come back with Claude's status code and body.
    """
    content = await claude_gateway.analyze_image(
        image=request.image,
        prompt=request.prompt,
        system_prompt=request.system_prompt,
    )
    return ContentResponse(content=content)


@router.post("/perplexity", response_model=ContentResponse)
async def chat(request: PerplexityRequest) -> ContentResponse:
    """
    Relay a chat conversation to Perplexity.

    Citations, when present, are appended between ---SOURCES--- and
    ---END_SOURCES--- markers, one per line.
    """
    content = await perplexity_gateway.chat(request.messages)
    return ContentResponse(content=content)
