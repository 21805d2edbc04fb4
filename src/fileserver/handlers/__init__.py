"""
=============================================================================
REQUEST HANDLERS
=============================================================================

    ResponseGenerator   Maps GET/HEAD/POST/PUT/DELETE onto the file store
                        and builds the response.

=============================================================================
"""

from .generator import ResponseGenerator

__all__ = ["ResponseGenerator"]
