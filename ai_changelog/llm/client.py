"""OpenAI Chat Completions Client"""

import os
import time
from typing import Callable

from ai_changelog.errors import EnvError, ProtocolError, TransportError
from ai_changelog.llm.base import LLMClient
from ai_changelog.llm.transport import Transport, TransportFailure, UrllibTransport
from ai_changelog.output import print_debug
from ai_changelog.prompts import ApiRequest

API_KEY_ENV = "OPENAI_API_KEY"
API_URL_ENV = "AI_CHANGELOG_API_URL"


class OpenAIClient(LLMClient):
    """Chat completions client. Requires OPENAI_API_KEY env var."""

    DEFAULT_URL = "https://api.openai.com/v1/chat/completions"
    TIMEOUT = 30  # seconds, per attempt
    MAX_ATTEMPTS = 3
    INITIAL_BACKOFF = 2  # seconds, doubled after each retry
    RETRY_STATUSES = {429}

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        transport: Transport | None = None,
        sleep: Callable[[float], None] | None = None,
        verbose: bool = False,
    ):
        self.api_key = api_key or os.environ.get(API_KEY_ENV)
        self.url = url or os.environ.get(API_URL_ENV) or self.DEFAULT_URL
        self.transport = transport or UrllibTransport()
        self.sleep = sleep or time.sleep
        self.verbose = verbose

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def send(self, request: ApiRequest) -> str:
        """POST the request, retrying 429s and transport failures with backoff."""
        if not self.api_key:
            raise EnvError(
                f"{API_KEY_ENV} environment variable is not set:\n"
                f"  export {API_KEY_ENV}='your-api-key'"
            )

        body = request.to_json()
        headers = self._headers()
        backoff = self.INITIAL_BACKOFF
        last_error = ""

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            print_debug(f"Attempt {attempt}/{self.MAX_ATTEMPTS}: POST {self.url}", self.verbose)
            try:
                response = self.transport.post(self.url, body, headers, self.TIMEOUT)
            except TransportFailure as e:
                last_error = str(e)
                print_debug(f"Attempt {attempt} failed: {last_error}", self.verbose)
            else:
                print_debug(f"Attempt {attempt} returned HTTP {response.status}", self.verbose)
                if response.status == 200:
                    return response.body
                if response.status not in self.RETRY_STATUSES:
                    raise ProtocolError(
                        f"API request failed with HTTP {response.status}: {response.body.strip()}",
                        status=response.status,
                        body=response.body,
                    )
                last_error = f"rate limited (HTTP {response.status})"

            if attempt < self.MAX_ATTEMPTS:
                print_debug(f"Retrying in {backoff}s...", self.verbose)
                self.sleep(backoff)
                backoff *= 2

        raise TransportError(f"Failed after {self.MAX_ATTEMPTS} attempts: {last_error}")
