"""Locate JSON values embedded in free-text model output."""

import json
from dataclasses import dataclass
from typing import Any, Literal, Optional

_OPENERS = {"array": "[", "object": "{"}
_TYPES = {"array": list, "object": dict}

_decoder = json.JSONDecoder()


@dataclass(frozen=True)
class ParseResult:
    """Either a parsed value or the reason parsing failed."""

    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def extract_json(text: Optional[str], kind: Literal["array", "object"]) -> ParseResult:
    """
    Parse the first well-formed JSON array or object in ``text``.

    Every position holding an opening bracket (or brace) is tried in order;
    the first one that decodes to a value of the requested kind wins. Text
    around the value, such as prose or markdown code fences, is ignored.

    Args:
        text: Model output
        kind: "array" or "object"

    Returns:
        ParseResult with ``value`` set on success, ``error`` otherwise
    """
    if not text:
        return ParseResult(error="empty response")

    opener = _OPENERS[kind]
    expected = _TYPES[kind]

    start = text.find(opener)
    if start < 0:
        return ParseResult(error=f"no JSON {kind} in response")

    while start >= 0:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, expected):
                return ParseResult(value=value)
        start = text.find(opener, start + 1)

    return ParseResult(error=f"malformed JSON {kind} in response")
