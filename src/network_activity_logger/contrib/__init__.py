"""
Host client bridges for network-activity-logger.

Each bridge publishes RequestStarted/RequestFinished to a LifecycleSignals hub
around the real transport call:
- requests_adapter: HTTPAdapter subclass for requests sessions
- httpx_transport: sync and async transport wrappers for httpx clients
"""

from .requests_adapter import ActivityHTTPAdapter, instrument_session
from .httpx_transport import ActivityTransport, AsyncActivityTransport

__all__ = [
    "ActivityHTTPAdapter",
    "instrument_session",
    "ActivityTransport",
    "AsyncActivityTransport",
]
