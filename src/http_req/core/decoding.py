"""
JSON decoding for response bodies.

decode_json() reads a whole body, closes it, and parses it. Syntax errors are
reported as DecodeError with the byte offset and the raw input, so the caller
can show the text around the failing byte:

    >>> decode_json(io.BytesIO(b'{"title": "Up", }'))
    Traceback (most recent call last):
    ...
    http_req.core.exceptions.DecodeError: syntax error near: `}`
"""

import json
from typing import Any, Optional, Union

import requests
from pydantic import TypeAdapter

from .exceptions import DecodeError


def _read_all(body: Any) -> bytes:
    if isinstance(body, requests.Response):
        return body.content or b""
    return body.read()


def _byte_offset(text: str, pos: int, size: int) -> int:
    """1-based byte offset of the character at pos, clamped to the input."""
    offset = len(text[:pos].encode("utf-8")) + 1
    return min(offset, max(size, 1))


def decode_json(body: Union[requests.Response, Any], target: Optional[Any] = None) -> Any:
    """
    Decode a JSON body, optionally into a typed target.

    The body is always closed, whether decoding succeeds or not.

    Args:
        body: requests.Response or binary file-like object
        target: Type to validate into (pydantic model, dataclass,
            List[Model], ...). None returns the parsed JSON value.

    Returns:
        Parsed JSON value, or an instance of target

    Raises:
        DecodeError: Body is not syntactically valid JSON
        pydantic.ValidationError: JSON does not fit target
        OSError, requests.exceptions.RequestException: Body could not be read

    Example:
        >>> class Movie(BaseModel):
        ...     title: str
        ...     year: int
        >>> movies = decode_json(response, List[Movie])
    """
    try:
        data = _read_all(body)
    finally:
        body.close()

    try:
        text = data.decode("utf-8")
        value = json.loads(text)
    except UnicodeDecodeError as e:
        raise DecodeError(e.start + 1, data, e) from e
    except json.JSONDecodeError as e:
        raise DecodeError(_byte_offset(text, e.pos, len(data)), data, e) from e

    if target is None:
        return value
    return TypeAdapter(target).validate_python(value)
