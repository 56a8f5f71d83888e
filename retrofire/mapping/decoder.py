"""JSON-to-model decoding on top of pydantic.

Architectural role:
    Turns raw response bodies into typed model instances for
    `retrofire.remote.base`. Models are `pydantic.BaseModel` subclasses that
    declare their fields and JSON aliases explicitly.

Declaration model:
    A model subclasses `Model` and declares annotated fields, using
    `Field(alias=...)` when the JSON key differs from the attribute name.
    Keys not declared on the model are ignored.

Type rules:
    Standard pydantic validation applies. Use `StrictInt`/`StrictStr` where a
    field must not accept coerced values (for example `True` for an int).

Failure handling:
    `pydantic.ValidationError` and malformed bodies are converted into
    `DecodeError`, tagged with the first failing key and list position.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from retrofire.errors import DecodeError


class Model(BaseModel):
    """Base class for records populated from JSON."""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict:
        """Return field values keyed by their JSON keys."""
        return self.model_dump(by_alias=True)


def parse_json(body, model_name=None) -> Any:
    """Parse a raw response body.

    Args:
        body: `bytes` or `str` payload.
        model_name: Model name attached to the error on failure.

    Returns:
        Parsed JSON value.

    Raises:
        DecodeError: Body is empty or not valid JSON.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as err:
            raise DecodeError(f"Response body is not UTF-8: {err}", model=model_name) from err

    if not body or not body.strip():
        raise DecodeError("Response body is empty", model=model_name)

    try:
        return json.loads(body)
    except json.JSONDecodeError as err:
        raise DecodeError(f"Malformed JSON: {err.msg}", model=model_name) from err


def _decode_error(model_name: str, err: ValidationError) -> DecodeError:
    first = err.errors()[0]
    loc = tuple(first.get("loc", ()))
    index = loc[0] if loc and isinstance(loc[0], int) else None
    keys = [str(part) for part in loc if not isinstance(part, int)]
    key = ".".join(keys) or None

    where = ""
    if index is not None:
        where += f" element {index}"
    if key:
        where += f" key {key!r}"
    return DecodeError(
        f"{model_name}:{where} {first['msg']}",
        model=model_name,
        key=key,
        index=index,
    )


@lru_cache(maxsize=None)
def _list_adapter(model: type) -> TypeAdapter:
    return TypeAdapter(list[model])


def decode_object(model: type, data) -> Model:
    """Validate a parsed JSON object into a new `model` instance.

    Raises:
        DecodeError: `data` is not an object or fails model validation.
    """
    try:
        return model.model_validate(data)
    except ValidationError as err:
        raise _decode_error(model.__name__, err) from err


def decode_list(model: type, data) -> list:
    """Validate a parsed JSON array into a list of `model` instances.

    A single bad element fails the whole list; partial results are never
    returned.
    """
    try:
        return _list_adapter(model).validate_python(data)
    except ValidationError as err:
        raise _decode_error(model.__name__, err) from err
