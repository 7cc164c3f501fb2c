"""ASGI response sending — translates a Response into ASGI messages."""

from warren._internal.asgi import Send
from warren.http.response import Response


def body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC 9110: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def encode_headers(response: Response, body_length: int) -> list[tuple[bytes, bytes]]:
    """Build raw ASGI header pairs, content-type and content-length included."""
    raw: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    )
    raw.append((b"content-length", str(body_length).encode("latin-1")))
    return raw


async def send_response(response: Response, send: Send) -> None:
    """Send *response* as one ``http.response.start`` and one body message."""
    body = response.body_bytes if body_allowed(response.status) else b""
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": body})
