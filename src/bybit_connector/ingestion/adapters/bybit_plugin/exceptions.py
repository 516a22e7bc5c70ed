"""
Bybit API Exception Hierarchy

Provides specific exception types for the failure kinds the venue reports
(or the connector detects before a request is sent), so callers can react
by kind instead of by venue code.
"""


class BybitAPIError(Exception):
    """Base exception for all Bybit connector errors."""

    def __init__(
        self,
        message: str,
        code: int | str | None = None,
        status_code: int | None = None,
        endpoint: str | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.endpoint = endpoint


# ---------- raised before any request is sent ----------


class AuthenticationRequiredError(BybitAPIError):
    """Private endpoint called without api_key/secret configured."""

    pass


class ArgumentsRequiredError(BybitAPIError):
    """A required argument (since/limit, price, currency code...) is missing."""

    pass


class BadSymbolError(BybitAPIError):
    """Symbol is not listed on the venue."""

    pass


class InvalidAddressError(BybitAPIError):
    """Withdrawal address is empty or malformed."""

    pass


# ---------- venue-reported ----------


class ExchangeError(BybitAPIError):
    """Venue reported a failure; unmapped codes land here with ``code`` kept."""

    pass


class AuthenticationError(ExchangeError):
    """Invalid api key or signature."""

    pass


class PermissionDeniedError(ExchangeError):
    """Key lacks permission, IP mismatch, or position state forbids the action."""

    pass


class InvalidNonceError(ExchangeError):
    """Request timestamp outside the recv window (clock skew)."""

    pass


class RateLimitError(ExchangeError):
    """Too many requests."""

    pass


class BadRequestError(ExchangeError):
    """Malformed or missing request parameter."""

    pass


class InvalidOrderError(ExchangeError):
    """Order parameters rejected by the venue."""

    pass


class InsufficientFundsError(ExchangeError):
    """Wallet or available balance too low."""

    pass


class OrderNotFoundError(InvalidOrderError):
    """Order does not exist."""

    pass


# ---------- transport ----------


class TransportError(BybitAPIError):
    """HTTP-layer failure with no venue classification."""

    pass
