"""
Main entry point for running orbitwm as a module.

Usage:
    python -m orbitwm start [--autostart PATH]
"""

from .cli import main

if __name__ == "__main__":
    import sys

    sys.exit(main())
