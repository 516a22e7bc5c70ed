"""
Shared enumerations for the connector.

Canonical (venue-agnostic) vocabulary used by the normalized entities and
by the request routing layer.
"""

import enum


# ============================================================================
# MARKET CLASSIFICATION
# ============================================================================
class MarketType(str, enum.Enum):
    """Market type of a listed instrument."""

    SPOT = "spot"
    FUTURE = "future"
    OPTION = "option"


# ============================================================================
# TRADING
# ============================================================================
class OrderSide(str, enum.Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, enum.Enum):
    """Order types accepted by create_order."""

    LIMIT = "limit"
    MARKET = "market"
    STOP_LIMIT = "stop_limit"
    STOP_MARKET = "stop_market"


class OrderStatus(str, enum.Enum):
    """Canonical order states. Unknown venue states pass through as plain strings."""

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    REJECTED = "rejected"


class TakerOrMaker(str, enum.Enum):
    TAKER = "taker"
    MAKER = "maker"


# ============================================================================
# TRANSFERS
# ============================================================================
class TransactionType(str, enum.Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class TransactionStatus(str, enum.Enum):
    """Canonical transfer states. Unknown venue states pass through as plain strings."""

    OK = "ok"
    PENDING = "pending"


# ============================================================================
# REQUEST ROUTING
# ============================================================================
class ApiScope(str, enum.Enum):
    """Named endpoint groups sharing an authentication/routing convention."""

    PUBLIC = "public"
    PRIVATE = "private"
    OPENAPI = "openapi"
    POSITION = "position"
    USER = "user"

    @property
    def is_public(self) -> bool:
        return self is ApiScope.PUBLIC


class HttpMethod(str, enum.Enum):
    GET = "GET"
    POST = "POST"

    @property
    def is_mutating(self) -> bool:
        return self is HttpMethod.POST
