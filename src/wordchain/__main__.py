"""
Module entry point for ``python -m wordchain``.
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
