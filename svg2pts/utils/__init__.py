"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - YAML loading and input/output stream selection (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (geometry, resample,
document, pipeline, cli).

Convenience imports:
    from svg2pts.utils import fs
    from svg2pts.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import logging_config

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'setup_logging',
    'get_logger',
    'push_context',
]
