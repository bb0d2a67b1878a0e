"""Pooled httpx client for relaying chat completions to Perplexity."""

import logging

import httpx

logger = logging.getLogger(__name__)

# Completions stream for a while before the first byte; connecting should not.
GATEWAY_TIMEOUT = httpx.Timeout(120.0, connect=10.0)
GATEWAY_LIMITS = httpx.Limits(max_connections=20, max_keepalive_connections=10)

_client: httpx.AsyncClient | None = None


def _build_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=GATEWAY_TIMEOUT, limits=GATEWAY_LIMITS, http2=True)


def get_gateway_client() -> httpx.AsyncClient:
    """
    Return the process-wide gateway client, opening a new one after shutdown.

    API keys travel as per-request headers, so one client serves every
    upstream the relay talks to.
    """
    global _client
    if _client is None or _client.is_closed:
        _client = _build_client()
        logger.debug("Opened gateway HTTP client")
    return _client


async def close_gateway_client() -> None:
    """Release pooled connections; called from the app lifespan on shutdown."""
    global _client
    client, _client = _client, None
    if client is not None and not client.is_closed:
        await client.aclose()
        logger.debug("Closed gateway HTTP client")
