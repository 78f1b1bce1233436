import json
from typing import Any

from docsum.llm.exceptions import LlmResponseError


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse a provider reply as a JSON object, tolerating markdown code fences.

    Raises:
        LlmResponseError: if the reply is not a JSON object.
    """
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise LlmResponseError(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise LlmResponseError("JSON response must be an object")
    return parsed
