import sys

from ai_changelog.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
