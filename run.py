#!/usr/bin/env python3
"""
Run the catalog fetcher from a source checkout.

Usage:
    python run.py [ENDPOINT] [--offline]
"""

from src.cli.catalog import main

if __name__ == "__main__":
    main()
