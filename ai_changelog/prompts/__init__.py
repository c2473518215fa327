"""Prompt Construction Package"""

from ai_changelog.prompts.builder import (
    ApiRequest,
    RequestBuilder,
    build_request,
    SYSTEM_PROMPT,
    USER_PROMPT_TEMPLATE,
)

__all__ = [
    "ApiRequest",
    "RequestBuilder",
    "build_request",
    "SYSTEM_PROMPT",
    "USER_PROMPT_TEMPLATE",
]
