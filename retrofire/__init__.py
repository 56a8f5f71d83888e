"""retrofire: deferred, typed calls over REST/JSON endpoints.

Architectural role:
    Wraps `requests` with an immutable request builder, a worker-pool
    transport, declarative JSON-to-model decoding and a single-shot `Call`
    object exposing success/failure continuations.

Package split:
    - `settings`: environment-driven configuration.
    - `errors`: failure taxonomy.
    - `request`: request descriptors and builder.
    - `transport`: HTTP execution.
    - `mapping`: JSON decoding into `Model` subclasses.
    - `remote`: `Call` and `RemoteBase`.
"""

from retrofire.errors import (
    DecodeError,
    ErrorResponse,
    InvalidRequestError,
    RetrofireError,
    TransportError,
)
from retrofire.mapping import Model
from retrofire.remote import Call, CallState, RemoteBase
from retrofire.request import RequestBuilder, RequestDescriptor, RequestMethod, build_request
from retrofire.transport import HttpTransport, TransportResponse

__version__ = "1.0.0"

__all__ = [
    "Call",
    "CallState",
    "DecodeError",
    "ErrorResponse",
    "HttpTransport",
    "InvalidRequestError",
    "Model",
    "RemoteBase",
    "RequestBuilder",
    "RequestDescriptor",
    "RequestMethod",
    "RetrofireError",
    "TransportError",
    "TransportResponse",
    "build_request",
]
