from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("checkcov")

logger = logging.getLogger("checkcov")

__all__ = ["__version__", "logger"]
