"""LLM Client Package"""

from ai_changelog.llm.base import LLMClient, LLMResponse, extract_content, parse_response
from ai_changelog.llm.client import OpenAIClient, API_KEY_ENV, API_URL_ENV
from ai_changelog.llm.transport import HttpResponse, Transport, TransportFailure, UrllibTransport

__all__ = [
    "LLMClient",
    "LLMResponse",
    "OpenAIClient",
    "HttpResponse",
    "Transport",
    "TransportFailure",
    "UrllibTransport",
    "extract_content",
    "parse_response",
    "API_KEY_ENV",
    "API_URL_ENV",
]
