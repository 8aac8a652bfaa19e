"""
Package entry point.

Allows running the application via:

    python -m schedulebuilder

This simply forwards execution to schedulebuilder.cli.main().
"""

from schedulebuilder.cli import main

if __name__ == "__main__":
    main()
