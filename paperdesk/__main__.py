"""
Entry point for running paperdesk as a module.

Usage:
    python -m paperdesk info document.json
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
