"""Error classification abstraction.

Separates error classification from HTTP client logic. Allows different
classification strategies per venue.
"""

from typing import Any, Protocol


class IErrorClassifier(Protocol):
    """Abstraction for error classification and mapping.

    Single Responsibility: Map HTTP status codes and response bodies to
    domain-specific exceptions.
    Does NOT:
    - Send requests
    - Decide on retry
    """

    def classify(
        self,
        status_code: int,
        body: Any,
        raw_body: str = "",
        endpoint: str | None = None,
    ) -> Exception | None:
        """Map a response to a domain exception.

        Args:
            status_code: HTTP status code
            body: JSON-decoded response body, None if not parseable
            raw_body: Raw response text
            endpoint: Request path that was called

        Returns:
            Domain-specific exception (e.g., RateLimitError, AuthenticationError),
            or None when the response is not a classified failure
        """
        ...
