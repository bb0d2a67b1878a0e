"""Claude gateway - single-shot image analysis relayed to the Messages API."""

import logging

import anthropic
from anthropic.types import MessageParam

from gains_api.config import settings
from gains_api.core.exceptions import InternalError, UpstreamError

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response"


class ClaudeGateway:
    """Relays image + prompt requests to Claude.

    SDK retries are disabled: the calling app owns retry policy, and an
    upstream failure must reach it with the upstream status.
    """

    media_type: str = "image/jpeg"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.claude_api_key
        self.model = model or settings.claude_model
        self.max_tokens = max_tokens or settings.claude_max_tokens
        self._client: anthropic.AsyncAnthropic | None = None

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        """Lazy-loaded async client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key, max_retries=0)
        return self._client

    def build_messages(self, image: str, prompt: str) -> list[MessageParam]:
        """One user turn: the base64 image followed by the text prompt."""
        return [
            {
                "role": "user",
                "content": [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": self.media_type,
                            "data": image,
                        },
                    },
                    {"type": "text", "text": prompt},
                ],
            }
        ]

    async def analyze_image(self, image: str, prompt: str, system_prompt: str) -> str:
        """
        Send an image and prompt to Claude and return the first text block.

        Raises:
            UpstreamError: Claude answered with a non-success status.
            InternalError: the request could not be sent or the reply not read.
        """
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system_prompt or anthropic.NOT_GIVEN,
                messages=self.build_messages(image, prompt),
            )
        except anthropic.APIStatusError as e:
            logger.error(f"Claude API error: {e.status_code} {e.body}")
            raise UpstreamError(e.status_code, e.body) from e
        except anthropic.APIError as e:
            logger.error(f"Claude request failed: {e}")
            raise InternalError(str(e)) from e

        for block in response.content:
            if block.type == "text" and block.text:
                return block.text
        return NO_RESPONSE_TEXT


claude_gateway = ClaudeGateway()
