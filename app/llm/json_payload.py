"""
Extraction of the JSON object an LLM was asked to return.

Models wrap JSON in prose or markdown fences and occasionally emit trailing
commas. ``parse_json_payload`` locates the first balanced ``{...}`` object in a
reply, parses it, and if that fails applies exactly one recovery pass
(``cleanup_json_text``) before giving up with ``PayloadParseError``.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from app.core.errors import PayloadParseError

logger = logging.getLogger(__name__)

_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_NEWLINES_RE = re.compile(r"[\r\n]+")


@dataclass
class ParsedPayload:
    """A JSON object recovered from free text."""
    data: Dict[str, Any]
    raw: str
    recovered: bool = False  # True when cleanup_json_text was needed


def find_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced ``{...}`` block in ``text``, or None.

    Braces inside JSON strings are ignored.
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def cleanup_json_text(raw: str) -> str:
    """Recovery pass: drop trailing commas before ``}``/``]`` and collapse newlines."""
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", raw)
    return _NEWLINES_RE.sub(" ", cleaned)


def parse_json_payload(text: str, allow_cleanup: bool = True) -> ParsedPayload:
    """
    Parse the first JSON object out of an LLM reply.

    Raises:
        PayloadParseError: no object found, or it does not parse even after cleanup
    """
    raw = find_json_object(text)
    if raw is None:
        logger.warning(f"No JSON object in AI reply: {(text or '')[:200]!r}")
        raise PayloadParseError("AI reply did not contain a JSON object")

    try:
        data = json.loads(raw)
        recovered = False
    except json.JSONDecodeError as first_error:
        if not allow_cleanup:
            raise PayloadParseError(f"Failed to parse AI response: {first_error.msg}") from first_error
        logger.warning(f"JSON parse failed ({first_error.msg}), applying cleanup pass")
        try:
            data = json.loads(cleanup_json_text(raw))
            recovered = True
        except json.JSONDecodeError:
            raise PayloadParseError(f"Failed to parse AI response: {first_error.msg}") from first_error

    if not isinstance(data, dict):
        raise PayloadParseError("AI response JSON is not an object")

    return ParsedPayload(data=data, raw=raw, recovered=recovered)
