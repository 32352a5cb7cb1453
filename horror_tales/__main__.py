"""
Entry point for running the CLI as a module.

Usage:
    python -m horror_tales generate
    python -m horror_tales list --theme "cursed object"
"""

import sys

from horror_tales.cli import main

if __name__ == "__main__":
    sys.exit(main())
