"""Git Operations Package"""

from ai_changelog.git.collector import GitCollector, GitError, FileChange

__all__ = [
    "GitCollector",
    "GitError",
    "FileChange",
]
