"""HTTP transport package.

Module split:
    - `client`: `HttpTransport`, its `TransportResponse` result type and the
      lazily created process-wide default transport.
"""

from retrofire.transport.client import HttpTransport, TransportResponse, get_default_transport

__all__ = ["HttpTransport", "TransportResponse", "get_default_transport"]
