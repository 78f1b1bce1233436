"""Free-text document summaries."""

import math
from pathlib import Path

from docsum.llm.client_base import BaseLlmClient
from docsum.llm.exceptions import LlmResponseError
from docsum.llm.prompt_loader import load_prompt_template
from docsum.logging.logger import Log

_MAX_OUTPUT_TOKENS = 500


class Summarizer:
    """Summarizes document text with a language model."""

    SYSTEM_PROMPT = (
        "You are a helpful assistant that creates clear, concise, and informative "
        "summaries of documents. Focus on extracting the most important information "
        "while maintaining clarity and readability."
    )

    def __init__(
        self,
        *,
        client: BaseLlmClient,
        model: str,
        temperature: float | None = None,
        max_words: int = 50,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_words = max_words
        self._prompt_template = load_prompt_template("summary_prompt.txt", prompt_template_path)

    async def summarize(self, text: str, max_words: int | None = None) -> str:
        """Summarize text in roughly max_words words.

        Raises:
            LlmError: if the provider call fails or returns no summary.
        """
        words = max_words if max_words is not None else self._max_words
        prompt = self._prompt_template.format(max_words=words, document_text=text)
        Log.info(f"Requesting summary from {self._model} ({len(text)} chars)")

        raw = await self._client.create_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self.SYSTEM_PROMPT,
            user_prompt=prompt,
            max_output_tokens=min(math.ceil(words * 1.5), _MAX_OUTPUT_TOKENS),
        )
        summary = raw.strip()
        if not summary:
            raise LlmResponseError("No summary generated from provider response")

        Log.info(f"Summary received ({len(summary)} chars)")
        return summary
