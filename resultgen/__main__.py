"""
Result Generator entry point.

Usage:
    python -m resultgen --input students.csv
"""

import sys

from resultgen.cli import main

if __name__ == "__main__":
    sys.exit(main())
