"""Pass-through gateways to third-party AI APIs."""

from gains_api.services.gateways.claude import ClaudeGateway, claude_gateway
from gains_api.services.gateways.http_client import close_gateway_client, get_gateway_client
from gains_api.services.gateways.perplexity import (
    SOURCES_END,
    SOURCES_START,
    PerplexityGateway,
    append_citations,
    perplexity_gateway,
)

__all__ = [
    "ClaudeGateway",
    "claude_gateway",
    "close_gateway_client",
    "get_gateway_client",
    "PerplexityGateway",
    "perplexity_gateway",
    "append_citations",
    "SOURCES_START",
    "SOURCES_END",
]
