"""Ports separating the venue core from its collaborators."""

from .http import HttpResponse, IHttpClient  # noqa: F401
from .registry import IMarketRegistry  # noqa: F401
from .validators import IErrorClassifier  # noqa: F401

__all__ = [
    "HttpResponse",
    "IErrorClassifier",
    "IHttpClient",
    "IMarketRegistry",
]
