from .value_objects import BybitConfig, CallOptions, HttpClientConfig

__all__ = ["BybitConfig", "CallOptions", "HttpClientConfig"]
