"""
Parsing helpers for JSON returned by LLMs.
"""
import json
from typing import Any, Dict

import structlog

logger = structlog.get_logger()


def strip_code_fences(text: str) -> str:
    """Remove ```json ... ``` wrapping if the model added it"""
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]
    return text.strip()


def repair_truncated_json(text: str) -> str:
    """Append the closing braces a truncated response is missing"""
    missing = text.count("{") - text.count("}")
    if missing > 0:
        return text + "}" * missing
    return text


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object from an LLM response.

    Tries once as-is (after stripping code fences) and once after appending
    any unmatched closing braces.

    Raises:
        json.JSONDecodeError: If the repaired text still does not parse
        ValueError: If the parsed value is not an object
    """
    cleaned = strip_code_fences(text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as first_error:
        repaired = repair_truncated_json(cleaned)
        if repaired == cleaned:
            raise
        logger.warning("llm_json_repaired",
                       error=str(first_error),
                       appended_braces=len(repaired) - len(cleaned))
        data = json.loads(repaired)

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    return data
