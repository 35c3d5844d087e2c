"""
Entry point for module execution (``python -m tinypack``).

This module delegates execution to the CLI handler in ``tinypack.cli.__main__``.
"""

import sys
from tinypack.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
