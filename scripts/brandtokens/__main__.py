"""
Entry point for running brandtokens as a module: python -m brandtokens
"""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
