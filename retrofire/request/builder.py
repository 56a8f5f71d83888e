"""Immutable request construction.

Architectural role:
    Produces the `RequestDescriptor` values consumed by
    `retrofire.remote.base.RemoteBase` and executed by
    `retrofire.transport.client.HttpTransport`.

Construction model:
    `RequestBuilder` is itself a frozen value. Every `with_*` call returns a
    new builder, so a partially configured builder can be shared and
    extended without affecting other users of it.

Merge behavior:
    Query, body and header maps are merged across calls. A later call
    overwrites keys set by an earlier one and leaves the other keys alone.

Validation:
    `RequestDescriptor` rejects an empty path or anything that is not an
    absolute http/https URL with a host, whether it is created by `build()`
    or constructed directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import urlparse

from retrofire.errors import InvalidRequestError


class RequestMethod(str, Enum):
    """HTTP verbs accepted by the transport."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"


def _frozen(mapping):
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully validated description of one HTTP request.

    Attributes:
        path: Absolute URL the request is sent to.
        method: HTTP verb.
        query_parameters: Query string values, all strings.
        body_parameters: JSON body fields, empty for body-less requests.
        headers: Extra request headers.
    """

    path: str
    method: RequestMethod = RequestMethod.GET
    query_parameters: Mapping[str, str] = field(default_factory=lambda: _frozen({}))
    body_parameters: Mapping[str, Any] = field(default_factory=lambda: _frozen({}))
    headers: Mapping[str, str] = field(default_factory=lambda: _frozen({}))

    def __post_init__(self):
        object.__setattr__(self, "path", _validate_path(self.path))
        object.__setattr__(self, "method", _coerce_method(self.method))
        # Re-wrap so callers cannot keep a handle on a mutable dict.
        object.__setattr__(self, "query_parameters", _frozen(self.query_parameters))
        object.__setattr__(self, "body_parameters", _frozen(self.body_parameters))
        object.__setattr__(self, "headers", _frozen(self.headers))

    @property
    def has_body(self) -> bool:
        return bool(self.body_parameters)


def _validate_path(path: str) -> str:
    if not path or not path.strip():
        raise InvalidRequestError("Request path must not be empty")

    path = path.strip()
    parsed = urlparse(path)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidRequestError(f"Request path is not an absolute http(s) URL: {path!r}")
    return path


def _coerce_method(method) -> RequestMethod:
    if isinstance(method, RequestMethod):
        return method
    try:
        return RequestMethod(str(method).upper())
    except ValueError:
        raise InvalidRequestError(f"Unsupported request method: {method!r}") from None


@dataclass(frozen=True)
class RequestBuilder:
    """Chainable, immutable accumulator for request settings.

    Example:
        request = (
            RequestBuilder("https://example.org/comments")
            .with_query_parameters({"postId": 1})
            .build()
        )
    """

    path: str = ""
    method: RequestMethod = RequestMethod.GET
    query_parameters: Mapping[str, str] = field(default_factory=dict)
    body_parameters: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def with_path(self, path: str) -> "RequestBuilder":
        return replace(self, path=path)

    def with_method(self, method) -> "RequestBuilder":
        return replace(self, method=_coerce_method(method))

    def with_query_parameters(self, parameters: Mapping[str, Any]) -> "RequestBuilder":
        merged = dict(self.query_parameters)
        merged.update({key: str(value) for key, value in parameters.items()})
        return replace(self, query_parameters=merged)

    def with_body_parameters(self, parameters: Mapping[str, Any]) -> "RequestBuilder":
        merged = dict(self.body_parameters)
        merged.update(parameters)
        return replace(self, body_parameters=merged)

    def with_headers(self, headers: Mapping[str, str]) -> "RequestBuilder":
        merged = dict(self.headers)
        merged.update({key: str(value) for key, value in headers.items()})
        return replace(self, headers=merged)

    def build(self) -> RequestDescriptor:
        """Validate accumulated settings and return an immutable descriptor.

        Raises:
            InvalidRequestError: Path is empty or not an absolute http(s) URL.
        """
        return RequestDescriptor(
            path=self.path,
            method=self.method,
            query_parameters=self.query_parameters,
            body_parameters=self.body_parameters,
            headers=self.headers,
        )


def build_request(
    path: str,
    method=RequestMethod.GET,
    query_parameters: Mapping[str, Any] | None = None,
    body_parameters: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> RequestDescriptor:
    """Build a descriptor in one step from keyword options."""
    builder = RequestBuilder(path).with_method(method)
    if query_parameters:
        builder = builder.with_query_parameters(query_parameters)
    if body_parameters:
        builder = builder.with_body_parameters(body_parameters)
    if headers:
        builder = builder.with_headers(headers)
    return builder.build()
