#!/usr/bin/env python3
"""
SleepLog CLI entry script.

Same commands as the installed `sleeplog` console script.

Usage:
    python cli.py --help
    python cli.py entries add --quality okay --hours 7
    python cli.py entries history
    python cli.py tui
"""

import sys
from pathlib import Path

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from sleeplog.cli.main import app  # noqa: E402

if __name__ == "__main__":
    app()
