import json
import re
from typing import Any
from pydantic import ValidationError
from gitgrade.errors import MalformedModelOutput
from gitgrade.models.analysis import AnalysisReport

_OPENING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```\s*$")


def strip_code_fences(text: str) -> str:
    """
    Removes a surrounding ```lang ... ``` wrapper and outer whitespace, if present.
    """
    text = text.strip()
    if text.startswith("```"):
        text = _OPENING_FENCE.sub("", text, count=1)
        text = _CLOSING_FENCE.sub("", text, count=1)
    return text.strip()


def _describe(errors: list) -> str:
    described = []
    for err in errors:
        location = ".".join(str(part) for part in err.get("loc", ())) or "report"
        described.append(f"{location}: {err.get('msg')}")
    return "; ".join(described)


def parse_report(raw_text: Any) -> AnalysisReport:
    """
    Turns a raw model completion into an AnalysisReport.

    Every way the completion can be wrong ends in MalformedModelOutput; nothing
    else escapes from here.
    """
    if not isinstance(raw_text, str):
        raise MalformedModelOutput(f"expected text, got {type(raw_text).__name__}")

    body = strip_code_fences(raw_text)
    if not body:
        raise MalformedModelOutput("completion is empty")

    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as e:
        raise MalformedModelOutput(f"not valid JSON ({e})") from e

    if not isinstance(data, dict):
        raise MalformedModelOutput(f"expected a JSON object, got {type(data).__name__}")

    try:
        return AnalysisReport.model_validate(data)
    except ValidationError as e:
        raise MalformedModelOutput(_describe(e.errors())) from e
