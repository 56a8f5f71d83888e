"""HTTP transport for request descriptors.

Architectural role:
    Executes `RequestDescriptor` values against the network and returns raw
    status/body pairs. Decoding and error classification by status code are
    left to `retrofire.remote`.

Execution model:
    - `send` performs one blocking request on the shared `requests.Session`.
    - `submit` schedules `send` on a `ThreadPoolExecutor` and returns a
      `concurrent.futures.Future`.

Retry behavior:
    No retry loop is implemented. Each request is attempted once with the
    configured timeout.

Failure handling model:
    Any `requests.exceptions.RequestException` is converted into
    `TransportError`. Non-2xx responses are NOT errors at this layer; they are
    returned like any other response.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Mapping

import requests

from retrofire.errors import TransportError
from retrofire.request import RequestDescriptor
from retrofire.settings import TransportConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Raw outcome of one HTTP exchange.

    Attributes:
        status_code: HTTP status.
        body: Undecoded response body.
        url: Final URL, including query string and any redirects.
        headers: Response headers.
    """

    status_code: int
    body: bytes
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """`requests`-backed transport with a private worker pool.

    The session and pool are created on construction and released by
    `close()`. Instances can be used as context managers.
    """

    def __init__(self, config: TransportConfig | None = None, session: requests.Session | None = None):
        self.config = config or TransportConfig()
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = self.config.user_agent
            session.headers["Accept"] = "application/json"
        else:
            # Keep headers the caller already set on their session.
            session.headers.setdefault("User-Agent", self.config.user_agent)
            session.headers.setdefault("Accept", "application/json")
        self._session = session
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="retrofire",
        )
        self._closed = False

    def send(self, request: RequestDescriptor) -> TransportResponse:
        """Perform one request synchronously.

        Args:
            request: Descriptor to execute.

        Returns:
            `TransportResponse` for any HTTP status.

        Raises:
            TransportError: No response could be obtained.
        """
        kwargs = {
            "params": dict(request.query_parameters) or None,
            "headers": dict(request.headers) or None,
            "timeout": self.config.timeout_seconds,
        }
        if request.has_body:
            kwargs["json"] = dict(request.body_parameters)

        logger.debug("Sending %s %s", request.method.value, request.path)
        try:
            response = self._session.request(request.method.value, request.path, **kwargs)
        except requests.exceptions.RequestException as err:
            logger.warning("%s %s failed without a response: %s", request.method.value, request.path, err)
            raise TransportError(request.path, err) from err

        logger.debug(
            "Received %s for %s %s",
            response.status_code,
            request.method.value,
            response.url,
        )
        return TransportResponse(
            status_code=response.status_code,
            body=response.content or b"",
            url=response.url,
            headers=dict(response.headers),
        )

    def submit(self, request: RequestDescriptor) -> Future:
        """Schedule `send` on the worker pool.

        Returns:
            Future resolving to a `TransportResponse`, or failing with
            `TransportError`.

        Raises:
            RuntimeError: The transport has been closed.
        """
        if self._closed:
            raise RuntimeError("HttpTransport is closed")
        return self._executor.submit(self.send, request)

    def close(self):
        """Wait for in-flight requests, then release the pool and session."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        self._session.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


_default_transport = None
_default_lock = threading.Lock()


def get_default_transport() -> HttpTransport:
    """Return the process-wide transport, creating it on first use."""
    global _default_transport
    with _default_lock:
        if _default_transport is None or _default_transport.closed:
            _default_transport = HttpTransport()
        return _default_transport
