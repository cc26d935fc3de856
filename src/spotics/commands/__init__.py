"""Commands for the spotics CLI.

This package provides the command functions and sub-apps mounted by spotics.cli.
"""

from . import config as config  # noqa: F401
from . import convert as convert  # noqa: F401
from . import fetch as fetch  # noqa: F401

__all__ = [
    "config",
    "convert",
    "fetch",
]
