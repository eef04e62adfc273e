"""Entry point: ``python -m inbox_pdf <list|ids|pdf>``."""

from __future__ import annotations

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
