"""Strategy pattern implementations for Bybit error mapping.

Replaces if/elif chains with an extensible handler chain.
Adding a new classification tier requires registration, not code modification.
"""

from typing import Any, Protocol


class IErrorHandler(Protocol):
    """Strategy for handling a specific error condition."""

    def can_handle(self, status_code: int, body: Any) -> bool:
        """Check if this handler can classify the response.

        Args:
            status_code: HTTP status code
            body: JSON-decoded body, None when unparseable

        Returns:
            True if this handler should process the response
        """
        ...

    def handle(
        self,
        status_code: int,
        body: Any,
        raw_body: str,
        endpoint: str | None,
    ) -> Exception | None:
        """Convert the response to an exception.

        Returns:
            Domain-specific exception, or None to let later handlers
            (and finally the transport default) decide
        """
        ...


class ErrorMapperChain:
    """Chain of Responsibility for error mapping.

    Handlers are tried in registration order; the first handler that
    claims the response decides the outcome, including "no error".
    """

    def __init__(self):
        """Initialize empty chain."""
        self._handlers: list[IErrorHandler] = []

    def register(self, handler: IErrorHandler) -> None:
        """Register error handler.

        Args:
            handler: Error handler
        """
        self._handlers.append(handler)

    def map_error(
        self,
        status_code: int,
        body: Any,
        raw_body: str = "",
        endpoint: str | None = None,
    ) -> Exception | None:
        """Map a response to an exception using the chain.

        Returns:
            Domain-specific exception, or None if no handler claimed it
        """
        for handler in self._handlers:
            if handler.can_handle(status_code, body):
                return handler.handle(status_code, body, raw_body, endpoint)
        return None
