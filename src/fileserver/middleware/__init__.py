"""
=============================================================================
MIDDLEWARE
=============================================================================

Cross-cutting behaviour wrapped around the response generator.

    base.py      Middleware ABC and MiddlewarePipeline
    logging.py   Access log lines (text or JSON)

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "LoggingMiddleware",
]
