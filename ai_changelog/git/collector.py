"""Git Collector - Read the staged diff from git."""

import subprocess
from dataclasses import dataclass

from ai_changelog import CHANGELOG_FILE
from ai_changelog.errors import EnvError, InputError


@dataclass
class FileChange:
    """Represents a single file's staged changes."""
    path: str
    additions: int
    deletions: int


class GitError(EnvError):
    """Raised when a git command fails."""
    pass


class GitCollector:
    """Queries git for staged changes, leaving the changelog out."""

    def __init__(self, excluded_paths: tuple[str, ...] = (CHANGELOG_FILE,)):
        self.excluded_paths = excluded_paths
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise EnvError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise EnvError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git working tree."""
        try:
            inside = self._run_git('rev-parse', '--is-inside-work-tree')
        except GitError:
            raise EnvError("Not in a git repository")
        if inside.strip() != 'true':
            raise EnvError("Not in a git repository")

    def _pathspec(self) -> list[str]:
        # Anchored at the repo root so subdirectories see the whole index
        return ['--', ':/', *(f':(top,exclude){path}' for path in self.excluded_paths)]

    def get_staged_diff(self) -> str:
        """Return the staged diff. Raises InputError when nothing is staged."""
        diff = self._run_git('diff', '--cached', *self._pathspec())
        if not diff.strip():
            raise InputError("No staged changes found. Stage your changes with 'git add' first.")
        return diff

    def get_staged_files(self) -> list[FileChange]:
        """Parse 'git diff --cached --numstat' output."""
        output = self._run_git('diff', '--cached', '--numstat', *self._pathspec())

        if not output.strip():
            return []

        files = []
        for line in output.strip().split('\n'):
            parts = line.split('\t')
            if len(parts) >= 3:
                # Binary files report '-' for both counts
                additions = int(parts[0]) if parts[0] != '-' else 0
                deletions = int(parts[1]) if parts[1] != '-' else 0
                files.append(FileChange(path=parts[2], additions=additions, deletions=deletions))

        return files
