"""Entry point for the xcode_test_engine package."""

import sys
from xcode_test_engine.cli import main

if __name__ == "__main__":
    sys.exit(main())
