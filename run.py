#!/usr/bin/env python3
"""
ATM Terminal Entry Point

Starts the interactive console over the seeded in-memory account.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from atm_terminal.cli import main


if __name__ == "__main__":
    sys.exit(main())
