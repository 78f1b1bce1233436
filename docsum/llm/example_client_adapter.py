"""Offline language-model client.

Use this module as a reference when implementing new provider adapters.
Implement BaseLlmClient and register the provider in LlmClientFactory.
"""

import json
from typing import ClassVar

from docsum.llm.client_base import BaseLlmClient


class ExampleClientAdapter(BaseLlmClient):
    """Adapter that answers without any network calls.

    Structured requests get an empty, schema-valid radiology extraction;
    free-text requests get a fixed summary. Useful for local development
    and tests.
    """

    SUMMARY: ClassVar[str] = "Example summary."

    EXTRACTION: ClassVar[dict[str, object]] = {
        "summary": "",
        "birads": {"value": None, "confidence": "low", "evidence": []},
        "breast_density": {"value": None, "evidence": []},
        "exam": {"type": None, "laterality": None, "evidence": []},
        "comparison": {"prior_exam_date": None, "evidence": []},
        "findings": [],
        "recommendations": [],
        "red_flags": [],
    }

    async def create_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float | None = None,
        json_schema: dict[str, object] | None = None,
        schema_name: str = "structured_output",
        max_output_tokens: int | None = None,
    ) -> str:
        _ = model, system_prompt, user_prompt, temperature, schema_name, max_output_tokens
        if json_schema is not None:
            return json.dumps(self.EXTRACTION)
        return self.SUMMARY

    async def check_connection(self, model: str) -> bool:
        _ = model
        return True
