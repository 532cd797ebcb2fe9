#!/usr/bin/env python3
"""
Convenience entry point to run the report CLI.

Usage examples:
  python cli.py models
  python cli.py report --request request.json --model anthropic__sonnet-3.5
  python cli.py search "solid state batteries" --time-filter month
"""

from reportgen.cli.app import main


if __name__ == "__main__":
    main()
