"""Response decoding package.

Module split:
    - `decoder`: the pydantic `Model` base plus `parse_json`,
      `decode_object` and `decode_list`.
"""

from retrofire.mapping.decoder import Model, decode_list, decode_object, parse_json

__all__ = ["Model", "decode_list", "decode_object", "parse_json"]
