"""
AI Changelog

Suggests a changelog entry and commit message from staged git changes.
"""

__version__ = "1.0.0"

# Keep a Changelog section names - single source of truth
# Used by: prompts/builder.py (system instruction)
CHANGELOG_SECTIONS = {
    'Added': 'New features',
    'Changed': 'Changes in existing functionality',
    'Deprecated': 'Soon-to-be removed features',
    'Removed': 'Features removed in this change',
    'Fixed': 'Bug fixes',
    'Security': 'Vulnerability fixes',
}

# The changelog itself is never part of the diff sent to the model
CHANGELOG_FILE = "CHANGELOG.md"
