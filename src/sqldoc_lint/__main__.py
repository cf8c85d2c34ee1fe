"""Module entry point for running with python -m sqldoc_lint."""

import sys

from sqldoc_lint.cli import main

if __name__ == "__main__":
    sys.exit(main())
