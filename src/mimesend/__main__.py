#!/usr/bin/env python3
"""
Allow running mimesend as a module: python -m mimesend

This enables the following usage:
    python -m mimesend [OPTIONS]

Which is equivalent to:
    mimesend [OPTIONS]
"""

from mimesend.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
