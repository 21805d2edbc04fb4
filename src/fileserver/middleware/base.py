"""
=============================================================================
MIDDLEWARE BASE CLASSES
=============================================================================

Middleware wraps the response generator with cross-cutting behaviour such
as access logging, without the generator knowing about it.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     CHAIN OF RESPONSIBILITY                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   request ──► MW1 ──► MW2 ──► ResponseGenerator.generate            │
    │                                        │                             │
    │   response ◄── MW1 ◄── MW2 ◄───────────┘                            │
    │                                                                      │
    │   First added = outermost.                                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Responses here are byte-exact, so middleware may observe them but should
not add headers.

=============================================================================
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)

# Type alias for the next handler in the chain
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Abstract base class for middleware.

        class Timing(Middleware):
            def __call__(self, request, next):
                start = time.time()
                response = next(request)
                print(time.time() - start)
                return response
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The incoming request.
            next: The next handler in the chain. Call it to continue.

        Returns:
            The response from next(), or a short-circuit response.
        """

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains middleware around a final handler.

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware())
        handler = pipeline.wrap(generator.generate)
        response = handler(request)
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append middleware. Returns self for chaining."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap ``handler`` with every middleware in the pipeline.

        Given [MW1, MW2] the result calls MW1 → MW2 → handler. We wrap in
        reverse so the first-added middleware ends up outermost.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler,
    ) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
