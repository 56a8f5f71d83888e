"""Request description package.

Module split:
    - `builder`: `RequestMethod`, `RequestDescriptor`, `RequestBuilder` and the
      one-shot `build_request` helper.
"""

from retrofire.request.builder import (
    RequestBuilder,
    RequestDescriptor,
    RequestMethod,
    build_request,
)

__all__ = ["RequestBuilder", "RequestDescriptor", "RequestMethod", "build_request"]
