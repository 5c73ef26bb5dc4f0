"""
Logging utilities for the Invoice Editor.

Every module logger is a child of the ``invoice_editor`` logger, which owns
the only handler. Raising LOG_LEVEL to DEBUG therefore turns on the export
stage traces across the editor callbacks, the pipeline and the extraction
services at once.
"""

import functools
import logging
import os
from pathlib import Path

ROOT_LOGGER = "invoice_editor"

# Default log level from environment or INFO
_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def logger(name: str) -> logging.Logger:
    """
    Return the logger for a module.

    Args:
        name: Logger name or __file__ path; paths are reduced to their stem,
            so ``.../export/pipeline.py`` logs as ``invoice_editor.pipeline``.

    Returns:
        logging.Logger under the package root logger.
    """
    if "/" in name or "\\" in name:
        name = Path(name).stem
    _root()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


@functools.cache
def _root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    # Dash and werkzeug configure the stdlib root; keep records out of it.
    root.propagate = False
    return root
