"""Deferred, single-shot request execution.

Architectural role:
    `Call` is what `RemoteBase` hands back to callers. It pairs one
    `RequestDescriptor` with a resolver that turns the raw transport response
    into a typed value, and it owns the continuations registered for that
    value.

Lifecycle:
    UNSTARTED -> IN_FLIGHT -> SUCCEEDED | FAILED

    - Nothing touches the network until `call()` runs.
    - `call()` dispatches at most once; later invocations return the same
      future.
    - Continuations run in registration order on the thread that completed
      the transport request, before the returned future resolves.

Blocking from continuations:
    Inside a continuation, `result()` on the call being resolved returns its
    outcome immediately. `result()` on any other call that has not resolved
    yet raises `RuntimeError` instead of blocking a transport worker.

Failure handling model:
    Transport, status and decode failures are routed to failure
    continuations and stored on the future. `call()` itself never raises for
    them. A continuation that raises is logged and does not stop the ones
    after it.
"""

import logging
import threading
from concurrent.futures import Future
from enum import Enum
from typing import Callable

from retrofire.errors import RetrofireError, TransportError
from retrofire.request import RequestDescriptor


logger = logging.getLogger(__name__)

# Call whose continuations are running on the current thread, if any.
_dispatching = threading.local()


class CallState(str, Enum):
    UNSTARTED = "unstarted"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Call:
    """One pending or completed request with its continuations.

    Args:
        request: Descriptor to execute.
        transport: Object exposing `submit(request) -> Future`.
        resolve: Maps a `TransportResponse` onto the success value. It raises
            `ErrorResponse` or `DecodeError` to signal failure.
    """

    def __init__(self, request: RequestDescriptor, transport, resolve: Callable):
        self._request = request
        self._transport = transport
        self._resolve = resolve
        self._success_callbacks = []
        self._failure_callbacks = []
        self._state = CallState.UNSTARTED
        self._future = None
        self._value = None
        self._error = None
        self._lock = threading.Lock()

    @property
    def request(self) -> RequestDescriptor:
        return self._request

    @property
    def state(self) -> CallState:
        return self._state

    def on_success(self, callback: Callable) -> "Call":
        """Register a continuation receiving the decoded value."""
        self._register(self._success_callbacks, callback)
        return self

    def on_failed(self, callback: Callable) -> "Call":
        """Register a continuation receiving the failure value."""
        self._register(self._failure_callbacks, callback)
        return self

    def _register(self, callbacks, callback):
        with self._lock:
            if self._state in (CallState.SUCCEEDED, CallState.FAILED):
                # Already resolved; late registrations are ignored.
                logger.debug("Ignoring continuation registered after %s resolved", self._request.path)
                return
            callbacks.append(callback)

    def call(self) -> Future:
        """Start the request if it has not been started yet.

        Returns:
            Future resolving to the decoded value, or failing with
            `TransportError`, `ErrorResponse` or `DecodeError`.
        """
        with self._lock:
            if self._future is not None:
                logger.debug("Call to %s already dispatched", self._request.path)
                return self._future
            self._future = Future()
            self._future.set_running_or_notify_cancel()
            self._state = CallState.IN_FLIGHT

        try:
            pending = self._transport.submit(self._request)
        except Exception as err:
            logger.warning("Could not dispatch %s: %s", self._request.path, err)
            self._finish(error=TransportError(self._request.path, err))
            return self._future

        pending.add_done_callback(self._complete)
        return self._future

    def result(self, timeout: float | None = None):
        """Start the request if needed and block for its value.

        Raises:
            The failure value, or `concurrent.futures.TimeoutError`.
            `RuntimeError` when called from a continuation on a call that
            has not resolved yet.
        """
        active = getattr(_dispatching, "call", None)
        if active is self:
            if self._error is not None:
                raise self._error
            return self._value

        future = self.call()
        if active is not None and not future.done():
            raise RuntimeError(
                f"Cannot block on pending call to {self._request.path} from a continuation"
            )
        return future.result(timeout=timeout)

    def _complete(self, pending: Future):
        try:
            value = self._resolve(pending.result())
        except RetrofireError as err:
            self._finish(error=err)
        except Exception as err:
            logger.exception("Unexpected failure resolving %s", self._request.path)
            self._finish(error=err)
        else:
            self._finish(value=value)

    def _finish(self, value=None, error=None):
        with self._lock:
            self._value = value
            self._error = error
            if error is None:
                self._state = CallState.SUCCEEDED
                callbacks = list(self._success_callbacks)
                argument = value
            else:
                self._state = CallState.FAILED
                callbacks = list(self._failure_callbacks)
                argument = error

        previous = getattr(_dispatching, "call", None)
        _dispatching.call = self
        try:
            for callback in callbacks:
                try:
                    callback(argument)
                except Exception:
                    logger.exception("Continuation for %s raised", self._request.path)
        finally:
            _dispatching.call = previous

        if error is None:
            self._future.set_result(value)
        else:
            self._future.set_exception(error)

    def __repr__(self):
        return f"Call({self._request.method.value} {self._request.path}, state={self._state.value})"
