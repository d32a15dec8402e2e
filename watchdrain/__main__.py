"""Entry point for running watchdrain as a module: python -m watchdrain.

This enables:
    python -m watchdrain [options] <dir>
"""

from watchdrain.api.cli.main import main

if __name__ == "__main__":
    main()
