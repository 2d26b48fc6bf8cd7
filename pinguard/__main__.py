"""
pinguard — entry point.

Usage:
    python -m pinguard check main.rb sensors/        # per-file checks
    python -m pinguard check --project src/ --json   # cross-file conflicts too
    python -m pinguard capabilities
    python -m pinguard serve --port 3000
"""

import sys

from pinguard.app import main


if __name__ == "__main__":
    sys.exit(main())
