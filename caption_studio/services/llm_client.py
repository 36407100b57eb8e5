"""
Completion gateway for caption generation using the OpenAI chat completions API.
"""
import logging
import time
from typing import Optional

import openai
from openai import OpenAI

from caption_studio.errors import UpstreamError
from caption_studio.models import CompletionOptions

logger = logging.getLogger(__name__)


class CompletionGateway:
    """
    Sends one system/user message pair to the completion API and returns the
    first choice's text. No streaming and no retries: every failure is raised
    as UpstreamError.
    """

    def __init__(self, api_key: Optional[str], client: Optional[OpenAI] = None):
        self._api_key = api_key
        self._client = client

    def _get_client(self) -> OpenAI:
        """Get or initialize the OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise UpstreamError("OPENAI_API_KEY environment variable not set")

            try:
                self._client = OpenAI(api_key=self._api_key)
                logger.info("OpenAI client initialized successfully")
            except openai.OpenAIError as e:
                logger.error(f"Failed to create OpenAI client: {type(e).__name__} - {e}")
                raise UpstreamError(f"Failed to create OpenAI client: {e}") from e
        return self._client

    def complete(
        self,
        system_instruction: str,
        user_instruction: str,
        options: CompletionOptions,
    ) -> str:
        """
        Request a single completion.

        Args:
            system_instruction: The system message.
            user_instruction: The user message.
            options: Model, max_tokens and temperature.

        Returns:
            Generated text of the first choice.

        Raises:
            UpstreamError: On missing credentials, API/transport errors, or a
                response without message content.
        """
        client = self._get_client()
        start_time = time.time()

        try:
            response = client.chat.completions.create(
                model=options.model,
                messages=[
                    {
                        "role": "system",
                        "content": system_instruction
                    },
                    {
                        "role": "user",
                        "content": user_instruction
                    }
                ],
                max_tokens=options.max_tokens,
                temperature=options.temperature,
            )
        except openai.APITimeoutError as e:
            logger.error("OpenAI API request timed out")
            raise UpstreamError("Caption generation request timed out") from e
        except openai.OpenAIError as e:
            logger.error(f"OpenAI API call failed: {type(e).__name__} - {e}")
            raise UpstreamError(f"Caption generation service error: {type(e).__name__} - {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            logger.error(f"Malformed completion response: {type(e).__name__} - {e}")
            raise UpstreamError("Malformed response from caption generation service") from e

        if content is None:
            logger.error("Completion response contained no message content")
            raise UpstreamError("Empty response from caption generation service")

        duration = time.time() - start_time
        logger.info(
            f"Completion received: model={options.model}, max_tokens={options.max_tokens}, "
            f"chars={len(content)}, duration={duration:.2f}s"
        )
        return content
