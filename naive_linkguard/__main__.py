# Allows the package to be run as a script using `python -m naive_linkguard`

from __future__ import annotations

import sys

from naive_linkguard.cli import main

if __name__ == "__main__":
    sys.exit(main())
