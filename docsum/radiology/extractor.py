"""Structured extraction of radiology reports via a language model."""

import json
from pathlib import Path

from docsum.llm.client_base import BaseLlmClient
from docsum.llm.parsing import parse_json_object
from docsum.llm.prompt_loader import load_json_schema, load_prompt_template
from docsum.logging.logger import Log
from docsum.radiology.exceptions import ReportTooShortError
from docsum.radiology.models import RadiologyExtraction
from docsum.radiology.validator import validate_and_build


class RadiologyExtractor:
    """Turns radiology report text into a RadiologyExtraction."""

    SYSTEM_PROMPT = (
        "You extract structured data from radiology reports. Return ONLY valid JSON "
        "matching the schema. Do not infer missing facts."
    )
    SCHEMA_NAME = "radiology_extraction"

    def __init__(
        self,
        *,
        client: BaseLlmClient,
        model: str,
        temperature: float | None = None,
        min_report_chars: int = 50,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._min_report_chars = min_report_chars
        self._prompt_template = load_prompt_template("radiology_prompt.txt", prompt_template_path)
        self._json_schema = json.loads(load_json_schema("radiology_schema.json", json_schema_path))

    async def extract(self, report_text: str) -> RadiologyExtraction:
        """Extract structured data from one report.

        Raises:
            ReportTooShortError: if the stripped text is shorter than min_report_chars.
            LlmError: if the provider call fails or returns invalid JSON.
            ExtractionValidationError: if the JSON does not match the schema.
        """
        if len(report_text.strip()) < self._min_report_chars:
            raise ReportTooShortError("Radiology report text is too short to summarize.")

        prompt = self._prompt_template.format(report_text=report_text)
        Log.info(f"Requesting radiology extraction from {self._model} ({len(report_text)} chars)")
        Log.debug(f"Radiology prompt:\n{prompt}")

        raw_response = await self._client.create_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self.SYSTEM_PROMPT,
            user_prompt=prompt,
            json_schema=self._json_schema,
            schema_name=self.SCHEMA_NAME,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        result = validate_and_build(parse_json_object(raw_response))
        Log.info(
            f"Radiology extraction complete: {len(result.findings)} findings, "
            f"{len(result.recommendations)} recommendations"
        )
        return result
