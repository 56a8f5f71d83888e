"""Reusable base class for typed REST endpoints.

Architectural role:
    API classes subclass `RemoteBase` and expose one method per endpoint.
    Each method builds a `RequestDescriptor` and returns the `Call` produced
    by `call_single`, `call_list` or `call_success`.

Call flow:
    endpoint method -> `RequestBuilder.build()` -> `call_*` -> `Call`
    -> caller registers continuations -> `Call.call()` -> transport
    -> status check -> JSON decode -> continuations.

Status handling:
    Any status outside 2xx becomes an `ErrorResponse` carrying the status,
    the request path and a detail message taken from the JSON body's
    `message`, `detail` or `error` string, or `""` when none is present.

Determinism:
    Request assembly and decoding are deterministic for a fixed response.
    Completion timing depends on the network.
"""

import json
import logging
from functools import partial

from retrofire import settings
from retrofire.errors import ErrorResponse
from retrofire.mapping import decode_list, decode_object, parse_json
from retrofire.remote.call import Call
from retrofire.request import RequestDescriptor
from retrofire.transport import TransportResponse, get_default_transport


logger = logging.getLogger(__name__)

DETAIL_KEYS = ("message", "detail", "error")


def detail_message(body: bytes) -> str:
    """Extract a human-readable detail from an error body.

    Returns `""` for empty, non-JSON or non-object bodies and when no known
    key holds a string.
    """
    if not body:
        return ""
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return ""
    if not isinstance(data, dict):
        return ""
    for key in DETAIL_KEYS:
        value = data.get(key)
        if isinstance(value, str):
            return value
    return ""


def check_status(request: RequestDescriptor, response: TransportResponse) -> TransportResponse:
    """Return `response` unchanged when it is 2xx, otherwise raise.

    Raises:
        ErrorResponse: Status outside the 2xx range.
    """
    if response.ok:
        return response

    logger.warning(
        "%s %s failed with status %s",
        request.method.value,
        request.path,
        response.status_code,
    )
    raise ErrorResponse(
        status_code=response.status_code,
        url=request.path,
        detail_message=detail_message(response.body),
    )


def _log_body(request, response):
    if settings.DEBUG:
        logger.debug("Response body for %s: %r", request.path, response.body)


def _resolve_single(model, request, response):
    check_status(request, response)
    _log_body(request, response)
    return decode_object(model, parse_json(response.body, model.__name__))


def _resolve_list(model, request, response):
    check_status(request, response)
    _log_body(request, response)
    return decode_list(model, parse_json(response.body, model.__name__))


def _resolve_success(request, response):
    check_status(request, response)
    return True


class RemoteBase:
    """Turns request descriptors into typed, deferred calls.

    Attributes:
        model: Default `Model` subclass used when `call_single`/`call_list`
            are not given one explicitly.
    """

    model = None

    def __init__(self, transport=None):
        self._transport = transport

    @property
    def transport(self):
        return self._transport or get_default_transport()

    def call_single(self, request: RequestDescriptor, model=None) -> Call:
        """Return a call whose success value is one decoded `model`."""
        model = self._model_for(model)
        return self._call(request, partial(_resolve_single, model, request))

    def call_list(self, request: RequestDescriptor, model=None) -> Call:
        """Return a call whose success value is a list of decoded `model`."""
        model = self._model_for(model)
        return self._call(request, partial(_resolve_list, model, request))

    def call_success(self, request: RequestDescriptor) -> Call:
        """Return a call whose success value is `True` on any 2xx status.

        The body is not decoded, which suits DELETE and other endpoints that
        answer with an empty or irrelevant payload.
        """
        return self._call(request, partial(_resolve_success, request))

    def _model_for(self, model):
        model = model or self.model
        if model is None:
            raise TypeError(f"{type(self).__name__} has no model to decode into")
        return model

    def _call(self, request, resolve) -> Call:
        if settings.DEBUG and request.has_body:
            logger.debug("Request body for %s: %r", request.path, dict(request.body_parameters))
        return Call(request, self.transport, resolve)
