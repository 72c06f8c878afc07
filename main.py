#!/usr/bin/env python3
"""SUBENUM main entry point.

Usage::

    python main.py serve
    python main.py serve --port 8005
    python main.py enumerate hackerone.com --json
    python main.py version
"""

from subenum.cli import main

if __name__ == "__main__":
    main()
