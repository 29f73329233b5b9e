#!/usr/bin/env python3
"""
Sleep Tracker TUI entry script.

Usage:
    python tui.py
    python tui.py --debug
"""

import sys
from pathlib import Path

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from sleeplog.tui.app import main  # noqa: E402

if __name__ == "__main__":
    main()
