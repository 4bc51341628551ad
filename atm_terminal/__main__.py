"""Main entry point for the ATM terminal"""

import sys

from atm_terminal.cli import main

if __name__ == "__main__":
    sys.exit(main())
