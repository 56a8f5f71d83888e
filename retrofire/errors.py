"""Failure values surfaced by request building and call execution.

Architectural role:
    Defines the error taxonomy shared by `retrofire.request`,
    `retrofire.transport`, `retrofire.mapping` and `retrofire.remote`.

Propagation model:
    - `InvalidRequestError` is raised synchronously from `RequestBuilder.build`.
    - `TransportError`, `ErrorResponse` and `DecodeError` are never raised out
      of `Call.call()`. They are handed to failure continuations and stored
      on the call's future.

Distinguishing failures:
    Callers tell failures apart by type only. An `ErrorResponse` means a
    response arrived with a non-2xx status; a `TransportError` means no
    response arrived at all; a `DecodeError` means the body could not be
    mapped onto the requested model.
"""


class RetrofireError(Exception):
    """Base class for every error raised or delivered by this package."""


class InvalidRequestError(RetrofireError, ValueError):
    """Raised when a request descriptor cannot be built."""


class TransportError(RetrofireError):
    """No HTTP response was received for a dispatched request."""

    def __init__(self, url, cause=None):
        self.url = url
        self.cause = cause
        reason = f": {cause}" if cause is not None else ""
        super().__init__(f"Transport failure for {url}{reason}")


class ErrorResponse(RetrofireError):
    """A response arrived with a status outside the 2xx range.

    Attributes:
        status_code: HTTP status returned by the server.
        url: Request path as built (query string excluded).
        detail_message: Server-provided detail text, `""` when none was sent.
    """

    def __init__(self, status_code: int, url: str, detail_message: str = ""):
        self.status_code = status_code
        self.url = url
        self.detail_message = detail_message or ""
        super().__init__(f"HTTP {status_code} for {url}")

    def __eq__(self, other):
        if not isinstance(other, ErrorResponse):
            return NotImplemented
        return (
            self.status_code == other.status_code
            and self.url == other.url
            and self.detail_message == other.detail_message
        )

    def __hash__(self):
        return hash((self.status_code, self.url, self.detail_message))

    def __repr__(self):
        return (
            f"ErrorResponse(status_code={self.status_code!r}, "
            f"url={self.url!r}, detail_message={self.detail_message!r})"
        )


class DecodeError(RetrofireError):
    """A response body could not be mapped onto the requested model.

    Attributes:
        model: Name of the model class being decoded, when known.
        key: JSON key that failed, when the failure is field-specific.
        index: Position in a JSON array, when decoding a list.
    """

    def __init__(self, message, model=None, key=None, index=None):
        self.model = model
        self.key = key
        self.index = index
        super().__init__(message)
