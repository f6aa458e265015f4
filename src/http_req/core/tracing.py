"""
Request/response tracing.

Renders a sent request as an equivalent curl command followed by the
response, and writes the whole block to a logger as a single record:

    curl -sS -L -XPOST \\
        -H'Content-Type: application/x-www-form-urlencoded' \\
        -d'a=1&b=2' \\
        "https://api.example.com/items"

    HTTP/1.1 200 OK
    {
       "id": 7
    }
"""

import json
import logging
from typing import List, Optional, Tuple

import requests

from .config import RequestConfig

INDENT = " " * 4
JSON_INDENT = 3

_HTTP_VERSIONS = {
    9: "HTTP/0.9",
    10: "HTTP/1.0",
    11: "HTTP/1.1",
    20: "HTTP/2.0",
}


def protocol_of(response: requests.Response) -> str:
    """Protocol string of a response, e.g. 'HTTP/1.1'."""
    version = getattr(response.raw, "version", None)
    return _HTTP_VERSIONS.get(version, "HTTP/1.1")


def status_of(response: requests.Response) -> str:
    """Status as '<code> <reason>', e.g. '200 OK'."""
    reason = response.reason or ""
    return f"{response.status_code} {reason}".rstrip()


def dump_response(response: requests.Response) -> bytes:
    """
    Serialize a response the way it looked on the wire.

    Status line and headers separated by CRLF, an empty line, then the body.
    Reading the body caches it on the response, so callers can still use
    response.content / response.json() afterwards.

    Raises:
        requests.exceptions.RequestException: If the body can't be read
    """
    lines = [f"{protocol_of(response)} {status_of(response)}"]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    head = "\r\n".join(lines).encode("latin-1", errors="replace")
    return head + b"\r\n\r\n" + (response.content or b"")


def split_dump(dump: bytes) -> Optional[Tuple[bytes, bytes]]:
    """Split a dump at the first blank line into (header, body)."""
    parts = dump.split(b"\r\n\r\n", 1)
    if len(parts) < 2:
        return None
    return parts[0], parts[1]


_CLOSING = {"{": "}", "[": "]"}
_WHITESPACE = " \t\r\n"


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def indent_json(body: bytes) -> str:
    """
    Pretty-print a JSON document with a 3-space indent.

    Only whitespace between tokens changes: key order, number literals and
    string escapes stay exactly as received (1.10 stays 1.10, 1E2 stays 1E2).

    Raises:
        ValueError: If body is not a single valid JSON document
            (NaN and Infinity included)
    """
    text = body.decode("utf-8")
    json.loads(text, parse_constant=_reject_constant)
    return _reindent(text.strip(_WHITESPACE))


def _reindent(text: str) -> str:
    """Re-indent an already validated JSON text token by token."""
    out: List[str] = []
    depth = 0
    in_string = False
    escaped = False
    i = 0

    def newline() -> str:
        return "\n" + " " * (JSON_INDENT * depth)

    while i < len(text):
        c = text[i]
        if in_string:
            out.append(c)
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                in_string = False
        elif c == '"':
            in_string = True
            out.append(c)
        elif c in _WHITESPACE:
            pass
        elif c in _CLOSING:
            # empty containers stay on one line
            j = i + 1
            while j < len(text) and text[j] in _WHITESPACE:
                j += 1
            if j < len(text) and text[j] == _CLOSING[c]:
                out.append(c + text[j])
                i = j
            else:
                depth += 1
                out.append(c + newline())
        elif c in "}]":
            depth -= 1
            out.append(newline() + c)
        elif c == ",":
            out.append("," + newline())
        elif c == ":":
            out.append(": ")
        else:
            out.append(c)
        i += 1

    return "".join(out)


class CurlTracer:
    """
    Formats a request/response pair and hands it to a logger.

    The tracer holds no per-request state; one instance is shared by every
    call made through a client.

    Args:
        config: Request configuration (trace flags, redirect policy)
        logger: Sink for the rendered trace (one INFO record per request)

    Example:
        >>> tracer = CurlTracer(RequestConfig(trace_body=True), logging.getLogger("http_req"))
        >>> tracer.trace(response.request, response, b"")
    """

    def __init__(self, config: RequestConfig, logger: logging.Logger):
        self.config = config
        self.logger = logger

    def trace(
        self,
        request: requests.PreparedRequest,
        response: requests.Response,
        captured: bytes = b"",
    ) -> Optional[str]:
        """
        Log the trace for one exchange.

        Never raises: an unreadable response body drops the response section.

        Returns:
            The logged text, or None when tracing is disabled
        """
        if not self.config.tracing:
            return None

        text = self.format(request, response, captured)
        self.logger.info(text)
        return text

    def format(
        self,
        request: requests.PreparedRequest,
        response: requests.Response,
        captured: bytes = b"",
    ) -> str:
        parts = [self.format_command(request, captured)]

        try:
            dump = dump_response(response)
        except (requests.exceptions.RequestException, OSError):
            dump = None

        sections = split_dump(dump) if dump is not None else None
        if sections is not None:
            parts.append("\n\n")
            parts.append(self.format_response(response, *sections))

        return "".join(parts)

    def format_command(self, request: requests.PreparedRequest, captured: bytes = b"") -> str:
        """Render the request as a curl invocation."""
        # -s silences the progress meter, -S keeps errors visible
        buf = ["\ncurl -sS"]
        if not self.config.skip_redirects:
            buf.append(" -L")
        buf.append(f" -X{request.method} \\\n")

        # requests keeps one value per header name
        for name, value in request.headers.items():
            buf.append(f"{INDENT}-H'{name}: {value}' \\\n")

        data = captured.decode("utf-8", errors="replace").strip() if captured else ""
        if data:
            buf.append(f"{INDENT}-d'{data}' \\\n")

        buf.append(f'{INDENT}"{request.url}"')
        return "".join(buf)

    def format_response(self, response: requests.Response, header: bytes, body: bytes) -> str:
        """Render the response status/headers and the (pretty) body."""
        buf = []
        if self.config.trace_headers:
            buf.append(header.decode("latin-1").replace("\r\n", "\n"))
            buf.append("\n\n")
        else:
            buf.append(f"{protocol_of(response)} {status_of(response)}\n")

        try:
            buf.append(indent_json(body))
        except ValueError:
            buf.append(body.decode("utf-8", errors="replace"))
        buf.append("\n")

        return "".join(buf)
