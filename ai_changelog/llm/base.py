"""LLM Base Classes and Response Validation"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ai_changelog.errors import ProtocolError
from ai_changelog.prompts import ApiRequest


@dataclass
class LLMResponse:
    """Validated text from a completions response."""
    content: str
    model: str = ""
    tokens_used: int = 0


def _load_body(raw_body: str) -> dict:
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, TypeError):
        raise ProtocolError("Malformed response: body is not valid JSON", body=str(raw_body))
    if not isinstance(data, dict):
        raise ProtocolError("Malformed response: expected a JSON object", body=raw_body)
    return data


def extract_content(raw_body: str) -> str:
    """Return choices[0].message.content, rejecting malformed or empty results."""
    data = _load_body(raw_body)

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise ProtocolError("Malformed response: missing choices[0].message.content", body=raw_body)

    if content is None:
        raise ProtocolError("Empty response: the model returned no content", body=raw_body)
    if not isinstance(content, str):
        raise ProtocolError("Malformed response: message content is not text", body=raw_body)
    if not content.strip():
        raise ProtocolError("Empty response: the model returned no content", body=raw_body)

    return content


def parse_response(raw_body: str) -> LLMResponse:
    """Extract the generated text along with model and token usage."""
    content = extract_content(raw_body)
    data = _load_body(raw_body)
    usage = data.get("usage") or {}
    tokens = usage.get("total_tokens", 0) if isinstance(usage, dict) else 0
    return LLMResponse(
        content=content,
        model=str(data.get("model", "")),
        tokens_used=tokens if isinstance(tokens, int) else 0,
    )


class LLMClient(ABC):
    """Abstract base for completion clients."""

    @abstractmethod
    def send(self, request: ApiRequest) -> str:
        """Perform the request and return the raw body of the successful response."""
        pass
