"""CLI Main Entry Point"""

import sys
import time

from ai_changelog.config import ConfigResolver, EffectiveConfig
from ai_changelog.errors import ChangelogError
from ai_changelog.git import GitCollector
from ai_changelog.llm import LLMClient, LLMResponse, OpenAIClient, parse_response
from ai_changelog.prompts import RequestBuilder
from ai_changelog.output import dim, print_changelog, print_debug, print_error

from ai_changelog.cli.args import parse_args
from ai_changelog.cli.commands import display_config


def _cli_overrides(args) -> dict:
    """CLI values that take precedence over the config file."""
    return {
        'model': args.model,
        'temperature': args.temperature,
        'max_tokens': args.max_tokens,
        'verbose': args.verbose or None,
    }


def _print_verbose_config(config: EffectiveConfig, resolver: ConfigResolver) -> None:
    source = resolver.loaded_from or "defaults"
    print_debug(f"Config source: {source}", config.verbose)
    for key, value in config.to_dict().items():
        print_debug(f"  {key} = {value}", config.verbose)


def _collect_diff(config: EffectiveConfig, collector: GitCollector | None = None) -> str:
    """Verify the repository and return the staged diff."""
    collector = collector or GitCollector()
    diff = collector.get_staged_diff()

    if config.verbose:
        files = collector.get_staged_files()
        print_debug(f"Staged files: {len(files)}", config.verbose)
        for change in files:
            print_debug(f"  {change.path} (+{change.additions} -{change.deletions})", config.verbose)

    return diff


def _print_verbose_stats(config: EffectiveConfig, diff: str, response: LLMResponse, timings: dict) -> None:
    if not config.verbose:
        return
    print_debug(f"Diff: ~{len(diff)//4} tokens ({len(diff)} chars)")
    print_debug(f"Response: {response.tokens_used} tokens from {response.model or config.model}")
    print_debug(f"Timings: git={timings['git']:.2f}s, api={timings['api']:.2f}s")


def generate_changelog(
    config: EffectiveConfig,
    client: LLMClient | None = None,
    collector: GitCollector | None = None,
) -> LLMResponse:
    """Run the pipeline: staged diff -> request -> API call -> validated text."""
    timings = {}

    t0 = time.time()
    diff = _collect_diff(config, collector)
    timings['git'] = time.time() - t0

    request = RequestBuilder().build(diff, config)

    client = client or OpenAIClient(verbose=config.verbose)
    t0 = time.time()
    raw_body = client.send(request)
    timings['api'] = time.time() - t0

    response = parse_response(raw_body)
    _print_verbose_stats(config, diff, response, timings)
    return response


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    try:
        resolver = ConfigResolver(args.config)
        config = resolver.resolve(_cli_overrides(args))

        if args.show_config:
            return display_config(config, resolver)

        _print_verbose_config(config, resolver)
        response = generate_changelog(config)
    except ChangelogError as e:
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print(dim("\nCancelled."), file=sys.stderr)
        return 130

    print_changelog(response.content)
    return 0
