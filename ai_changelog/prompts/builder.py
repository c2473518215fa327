"""Request Builder - Turn a staged diff into a chat-completions request."""

import json
from dataclasses import dataclass

from ai_changelog import CHANGELOG_SECTIONS
from ai_changelog.config import EffectiveConfig
from ai_changelog.errors import InputError


def _format_sections() -> str:
    return '\n'.join(f"- ### {name}: {desc}" for name, desc in CHANGELOG_SECTIONS.items())


SYSTEM_PROMPT = f"""You are a release engineer who writes changelog entries and commit messages from git diffs.

Write a changelog entry in the Keep a Changelog format. Group changes under these headings, omitting empty ones:
{_format_sections()}

Formatting rules:
- One bullet per notable change, written in the imperative mood
- Under each bullet, list every affected file path on its own line, indented by two spaces
- Wrap every file path in backticks, e.g. `src/app.py`
- Do not invent changes that are not in the diff

After the changelog entry, add a line containing only "### Commit Message" followed by a conventional commit message (type(scope): subject, then an optional short body)."""

USER_PROMPT_TEMPLATE = """Generate a changelog entry and commit message for the following staged changes:

{diff}"""


@dataclass(frozen=True)
class ApiRequest:
    """One chat-completions request. Built once, serialized once."""
    model: str
    system_instruction: str
    user_message: str
    temperature: float
    max_tokens: int

    def to_payload(self) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system_instruction},
                {"role": "user", "content": self.user_message},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def to_json(self) -> bytes:
        return json.dumps(self.to_payload(), ensure_ascii=False).encode('utf-8')


class RequestBuilder:
    """Constructs the request body sent to the completions endpoint."""

    def __init__(self, system_prompt: str = SYSTEM_PROMPT, template: str = USER_PROMPT_TEMPLATE):
        self.system_prompt = system_prompt
        self.template = template

    def build(self, diff: str, config: EffectiveConfig) -> ApiRequest:
        if not diff or not diff.strip():
            raise InputError("No staged changes found. Stage your changes with 'git add' first.")
        return ApiRequest(
            model=config.model,
            system_instruction=self.system_prompt,
            user_message=self.template.format(diff=diff),
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )


def build_request(diff: str, config: EffectiveConfig) -> ApiRequest:
    return RequestBuilder().build(diff, config)
