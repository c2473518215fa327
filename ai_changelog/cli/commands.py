"""CLI Commands"""

import os

from ai_changelog.config import ConfigResolver, EffectiveConfig
from ai_changelog.llm import API_KEY_ENV, API_URL_ENV, OpenAIClient
from ai_changelog.output import bold, dim, info, success, warning, CHECK


def display_config(config: EffectiveConfig, resolver: ConfigResolver) -> int:
    """Display the resolved configuration."""
    print(f"\n{bold('Current Configuration')}\n")

    if resolver.loaded_from:
        print(f"  {dim('Loaded from:')} {resolver.loaded_from}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no {resolver.path} found)")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    model:       {info(config.model)}")
    print(f"    temperature: {info(str(config.temperature))}")
    print(f"    max_tokens:  {info(str(config.max_tokens))}")
    print(f"    verbose:     {info(str(config.verbose).lower())}")

    print()
    print(f"  {bold('Environment:')}")
    if os.environ.get(API_KEY_ENV):
        print(f"    {API_KEY_ENV}: {success(CHECK)} set")
    else:
        print(f"    {API_KEY_ENV}: {warning('not set')}")
    print(f"    endpoint:       {info(os.environ.get(API_URL_ENV) or OpenAIClient.DEFAULT_URL)}")
    print()

    return 0

