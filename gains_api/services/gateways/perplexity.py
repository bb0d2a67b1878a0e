"""Perplexity gateway - chat completions with citations folded into the reply."""

import logging
from typing import Any

import httpx

from gains_api.config import settings
from gains_api.core.exceptions import InternalError, UpstreamError
from gains_api.services.gateways.http_client import get_gateway_client

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response"
SOURCES_START = "---SOURCES---"
SOURCES_END = "---END_SOURCES---"


def append_citations(content: str, citations: list[Any]) -> str:
    """
    Append a sentinel-delimited source block to the reply text.

    The mobile client splits on the sentinels to render sources separately.
    With no citations the content is returned unchanged.
    """
    if not citations:
        return content
    lines = "".join(f"{citation}\n" for citation in citations)
    return f"{content}\n\n{SOURCES_START}\n{lines}{SOURCES_END}"


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class PerplexityGateway:
    """Relays chat messages to Perplexity's OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        api_url: str | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.perplexity_api_key
        self.model = model or settings.perplexity_model
        self.api_url = api_url or settings.perplexity_api_url

    async def chat(
        self,
        messages: list[dict[str, Any]],
        client: httpx.AsyncClient | None = None,
    ) -> str:
        """
        Forward the conversation verbatim and return the reply text.

        Raises:
            UpstreamError: Perplexity answered with a non-success status.
            InternalError: transport failure or an unreadable reply.
        """
        http = client or get_gateway_client()
        try:
            response = await http.post(
                self.api_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={"model": self.model, "messages": messages},
            )
        except httpx.HTTPError as e:
            logger.error(f"Perplexity request failed: {e}")
            raise InternalError(str(e)) from e

        if not response.is_success:
            body = _error_body(response)
            logger.error(f"Perplexity API error: {response.status_code} {body}")
            raise UpstreamError(response.status_code, body)

        try:
            data = response.json()
            choices = data.get("choices") or []
            message = (choices[0].get("message") or {}) if choices else {}
            content = message.get("content") or NO_RESPONSE_TEXT
            citations = data.get("citations") or []
        except (ValueError, AttributeError, TypeError) as e:
            logger.error(f"Unreadable Perplexity response: {e}")
            raise InternalError(f"Invalid response from Perplexity: {e}") from e

        return append_citations(content, list(citations))


perplexity_gateway = PerplexityGateway()
