"""Core application dependencies.

These functions define application-level dependency boundaries and are overridden
by infrastructure in `main.py`.
"""

from typing import NoReturn


def missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")
