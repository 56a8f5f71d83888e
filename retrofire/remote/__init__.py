"""Remote endpoint package.

Module split:
    - `call`: the deferred, single-shot `Call` and its `CallState`.
    - `base`: `RemoteBase`, status checking and error-detail extraction.
"""

from retrofire.remote.base import RemoteBase
from retrofire.remote.call import Call, CallState

__all__ = ["Call", "CallState", "RemoteBase"]
