"""Command-line entry point for the voice product finder."""

import sys

from voicecart.main import main

if __name__ == "__main__":
    sys.exit(main())
