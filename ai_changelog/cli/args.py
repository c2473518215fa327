"""CLI Argument Parsing"""

import argparse
import argcomplete

from ai_changelog import __version__
from ai_changelog.config import CONFIG_FILENAME


class _HelpFormatter(argparse.HelpFormatter):
    """Capitalized 'Usage:' prefix."""

    def add_usage(self, usage, actions, groups, prefix=None):
        if prefix is None:
            prefix = 'Usage: '
        return super().add_usage(usage, actions, groups, prefix)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ai-changelog',
        formatter_class=_HelpFormatter,
        description='Suggest a changelog entry and commit message for your staged changes',
        epilog=f'Requires OPENAI_API_KEY. Defaults can be set in ~/{CONFIG_FILENAME} (JSON).'
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s version {__version__}')

    # Model options
    parser.add_argument('-m', '--model', type=str, metavar='NAME', help='Model name (default: gpt-4-1106-preview)')
    parser.add_argument('-t', '--temperature', type=float, metavar='FLOAT', help='Sampling temperature, 0.0-2.0 (default: 0.3)')
    parser.add_argument('-k', '--max-tokens', type=int, metavar='INT', help='Maximum tokens in the response (default: 500)')

    # Output options
    parser.add_argument('-v', '--verbose', action='store_true', help='Show debug info (config, attempts, tokens used)')

    # Setup/config
    parser.add_argument('--config', type=str, metavar='PATH', help=f'Config file to read (default: ~/{CONFIG_FILENAME})')
    parser.add_argument('--show-config', action='store_true', help='Show the resolved configuration and exit')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
