"""
CLI entry point.

Usage:
    python -m centralstorage upload photo.jpg
"""
import sys

from centralstorage.cli import main

if __name__ == "__main__":
    sys.exit(main())
