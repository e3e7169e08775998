"""Text-to-markdown conversion through an OpenAI-compatible LLM endpoint."""

import asyncio
import logging
import os
from typing import Optional

from .constants import DEFAULT_MARKDOWN_BASE_URL, DEFAULT_MARKDOWN_MODEL
from .exceptions import ConversionError

logger = logging.getLogger(__name__)

MARKDOWN_PROMPT = (
    "convert the text into clean markdown following markdown best practices for llm:\n"
    "- start Headings with #\n"
    "- proper spacing for readability\n"
    "Output only the content.\n\n"
)


class MarkdownConverter:
    """Client converting extracted page text into markdown.

    The API key is only required when ``convert`` is called, so the service
    can start without one and report the problem per request.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        """Initialize the converter.

        Args:
            api_key: API key (defaults to GROQ_API_KEY)
            model: Model name (defaults to GROQ_MODEL or the Llama 4 Scout model)
            base_url: Chat-completions base URL (defaults to the Groq endpoint)
        """
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        self.model = model or os.getenv("GROQ_MODEL", DEFAULT_MARKDOWN_MODEL)
        self.base_url = base_url or os.getenv("GROQ_BASE_URL", DEFAULT_MARKDOWN_BASE_URL)

    def _build_prompt(self, text: str) -> str:
        return f"{MARKDOWN_PROMPT}{text}"

    def convert(self, text: str) -> str:
        """Convert plain text to markdown.

        Args:
            text: Plain text extracted from a page

        Returns:
            Markdown produced by the model

        Raises:
            ConversionError: If no API key is configured or the call fails
        """
        if not self.api_key:
            raise ConversionError("GROQ_API_KEY environment variable not set")

        import openai

        try:
            client = openai.OpenAI(api_key=self.api_key, base_url=self.base_url)
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": self._build_prompt(text)}],
            )
        except openai.OpenAIError as e:
            logger.error(f"Markdown conversion failed: {e}")
            raise ConversionError(f"Markdown conversion failed: {e}") from e

        if not response.choices:
            raise ConversionError("Markdown conversion returned no choices")

        content = response.choices[0].message.content
        return content or ""

    async def aconvert(self, text: str) -> str:
        """Run ``convert`` in a worker thread."""
        return await asyncio.to_thread(self.convert, text)
