"""Error kinds reported by the changelog pipeline.

Every error is terminal for the current invocation: the CLI prints the
message to stderr and exits non-zero.
"""


class ChangelogError(Exception):
    """Base for all pipeline failures."""
    pass


class ConfigError(ChangelogError):
    """Raised when the config file or a CLI override is invalid."""
    pass


class EnvError(ChangelogError):
    """Raised when the environment can't run the tool (no repo, no git, no API key)."""
    pass


class InputError(ChangelogError):
    """Raised when there is nothing to describe."""
    pass


class TransportError(ChangelogError):
    """Raised when retryable network failures outlast the attempt cap."""
    pass


class ProtocolError(ChangelogError):
    """Raised on a non-retryable status or an unusable response body."""

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


__all__ = [
    "ChangelogError",
    "ConfigError",
    "EnvError",
    "InputError",
    "TransportError",
    "ProtocolError",
]
