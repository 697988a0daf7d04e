"""Command-line interface."""
import sys

from ootw_decoder.cli import main

if __name__ == "__main__":
    sys.exit(main())
