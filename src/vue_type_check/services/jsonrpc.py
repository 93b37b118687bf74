"""JSON-RPC message framing used on the language server pipes."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from vue_type_check.errors import LanguageServerError

METHOD_NOT_FOUND = -32601


def encode_message(payload: dict[str, Any]) -> bytes:
    """Frame a JSON-RPC payload with a Content-Length header."""
    body = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return f"Content-Length: {len(body)}\r\n\r\n".encode("ascii") + body


async def read_message(reader: asyncio.StreamReader) -> dict[str, Any] | None:
    """Read one framed message.

    Returns:
        The decoded payload, or None when the stream ends between messages.

    Raises:
        LanguageServerError: If the stream ends mid-message or a frame is
            malformed.
    """
    headers: dict[str, str] = {}
    while True:
        line = await reader.readline()
        if not line:
            if headers:
                raise LanguageServerError("Language server closed the stream mid-message")
            return None
        text = line.decode("ascii", errors="replace").strip()
        if not text:
            if headers:
                break
            continue
        name, _, value = text.partition(":")
        headers[name.strip().lower()] = value.strip()

    try:
        length = int(headers["content-length"])
    except (KeyError, ValueError) as e:
        raise LanguageServerError(f"Malformed message header: {headers!r}") from e

    try:
        body = await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        raise LanguageServerError("Language server closed the stream mid-message") from e

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise LanguageServerError(f"Malformed message body: {e}") from e
    if not isinstance(payload, dict):
        raise LanguageServerError("Message body is not a JSON object")
    return payload
