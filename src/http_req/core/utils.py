"""
Utility functions for HTTP requests.

Includes:
- Status code classification
- Form encoding for POST/PUT bodies
"""

from typing import Iterable, Mapping, Sequence, Tuple, Union
from urllib.parse import urlencode

FormValue = Union[str, Sequence[str]]
FormValues = Union[Mapping[str, FormValue], Iterable[Tuple[str, FormValue]]]

# 226 IM Used closes the success band (delta-encoded responses)
STATUS_OK = 200
STATUS_IM_USED = 226


def is_success(status_code: int) -> bool:
    """
    Check whether an HTTP status code counts as success.

    Args:
        status_code: HTTP status code

    Returns:
        True if status_code is within 200..226 inclusive

    Examples:
        >>> is_success(200)
        True
        >>> is_success(226)
        True
        >>> is_success(227)
        False
    """
    return STATUS_OK <= status_code <= STATUS_IM_USED


def encode_form(values: FormValues) -> str:
    """
    Encode key/value pairs as application/x-www-form-urlencoded.

    Keys are sorted; a key mapped to a list or tuple is emitted once per value
    in the given order. Spaces become '+'.

    Args:
        values: Mapping or iterable of (key, value) pairs

    Returns:
        Encoded form string

    Examples:
        >>> encode_form({"b": "2", "a": "1"})
        'a=1&b=2'
        >>> encode_form({"tag": ["x", "y"], "q": "hello world"})
        'q=hello+world&tag=x&tag=y'
    """
    items = values.items() if isinstance(values, Mapping) else values

    pairs = []
    for key, value in sorted(items, key=lambda item: item[0]):
        if isinstance(value, (list, tuple)):
            pairs.extend((key, v) for v in value)
        else:
            pairs.append((key, value))

    return urlencode(pairs)
