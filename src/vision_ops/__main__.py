"""
Entry point for running vision ops as a module.

Usage:
    python -m vision_ops --op <operation> -i <input> -o <output>
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
