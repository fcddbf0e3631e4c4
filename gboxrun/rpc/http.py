"""Minimal HTTP/1.1 framing for the control plane.

Only what the control plane needs: one request per connection, a request
line, headers, and an optional Content-Length body on POST. The response is
always ``200 OK`` with a JSON body; failure lives in the body's ``success``
flag, never in the status code.

Parsing is deliberately loose:
    - The request line splits on whitespace runs; fewer than three tokens
      abandons the connection without a response.
    - Header lines split on the first ``": "``; lines without it are skipped.
      Names keep the case they arrived with, and a repeated name overwrites.
    - Only POST bodies are read, and only when Content-Length is present.
      A POST body sent without Content-Length is left unread.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field

from gboxrun.core.errors import GboxError
from gboxrun.core.types import ApiResponse

CORS_HEADERS = (
    "Access-Control-Allow-Origin: *",
    "Access-Control-Allow-Methods: GET, POST, OPTIONS",
    "Access-Control-Allow-Headers: Content-Type",
)


@dataclass
class HttpRequest:
    """Parsed HTTP request.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        path: Request target exactly as sent (e.g., "/api/start")
        version: Protocol token from the request line
        headers: Header names (case as received) to values
        body: Request body, or None when no body was read
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


class HttpParseError(GboxError):
    """Raised when an HTTP request cannot be parsed."""


def _decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8").rstrip("\r\n")
    except UnicodeDecodeError as e:
        raise HttpParseError(f"Invalid request encoding: {e}") from e


async def _read_line(reader: asyncio.StreamReader) -> bytes:
    try:
        return await reader.readline()
    except (ValueError, asyncio.LimitOverrunError) as e:
        # readline() refuses lines longer than the reader's buffer limit
        raise HttpParseError(f"Line too long: {e}") from e


async def read_http_request(reader: asyncio.StreamReader) -> HttpRequest:
    """Read and parse one HTTP request from the stream.

    Raises:
        HttpParseError: If the request line is missing or malformed, a line
            exceeds the reader's limit, the Content-Length is not an
            integer, or text is not valid UTF-8.
    """
    request_line = await _read_line(reader)
    if not request_line:
        raise HttpParseError("Empty request")

    parts = _decode_line(request_line).split()
    if len(parts) < 3:
        raise HttpParseError(f"Invalid request line: {parts!r}")
    method, path, version = parts[0], parts[1], parts[2]

    headers: dict[str, str] = {}
    while True:
        raw = await _read_line(reader)
        line = _decode_line(raw)
        if not line:
            break
        name, sep, value = line.partition(": ")
        if not sep:
            continue
        headers[name] = value

    request = HttpRequest(method=method, path=path, version=version, headers=headers)

    content_length = request.header("Content-Length")
    if method == "POST" and content_length is not None:
        try:
            length = int(content_length)
        except ValueError as e:
            raise HttpParseError(f"Invalid Content-Length: {content_length}") from e
        request.body = await _read_body(reader, length)

    return request


async def _read_body(reader: asyncio.StreamReader, length: int) -> str:
    if length <= 0:
        return ""
    try:
        data = await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        # Peer closed early; keep what arrived.
        data = e.partial
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HttpParseError(f"Invalid body encoding: {e}") from e


def serialize_api_response(response: ApiResponse) -> str:
    """Serialize an ApiResponse to compact JSON."""
    return json.dumps(response.to_dict(), separators=(",", ":"), ensure_ascii=False)


def build_http_response(content: str) -> bytes:
    """Frame a JSON body as a complete ``200 OK`` HTTP/1.1 response."""
    body = content.encode("utf-8")
    lines = [
        "HTTP/1.1 200 OK",
        "Content-Type: application/json",
        f"Content-Length: {len(body)}",
        *CORS_HEADERS,
        "",
        "",
    ]
    return "\r\n".join(lines).encode("utf-8") + body


async def send_http_response(writer: asyncio.StreamWriter, response: ApiResponse) -> None:
    """Write ``response`` as the connection's single HTTP response."""
    writer.write(build_http_response(serialize_api_response(response)))
    await writer.drain()
