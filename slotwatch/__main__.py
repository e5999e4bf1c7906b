"""
Package entry point.

Allows running the application via:

    python -m slotwatch

This simply forwards execution to slotwatch.cli.main().
"""

from slotwatch.cli import main

if __name__ == "__main__":
    main()
