#!/usr/bin/env python3
"""
Convenience shim to run absopds from a source checkout.
Usage: python absopds.py [--verify|--help|--config PATH]
"""

from absopds.cli import main


if __name__ == "__main__":
    main()
