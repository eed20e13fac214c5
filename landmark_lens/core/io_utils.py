"""Transport adapters: turn an uploaded payload into a plain byte buffer."""

import base64
import binascii
import re

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w.+-]+=[\w.+-]+)*);base64,", re.IGNORECASE)


def decode_data_url(value: str) -> bytes:
    """
    Decode a base64 data URL (``data:image/jpeg;base64,...``) or bare base64 into bytes.

    Raises ValueError when the payload is empty or not valid base64.
    """
    if value is None:
        raise ValueError("Image payload is empty")
    payload = value.strip()
    match = _DATA_URL_RE.match(payload)
    if match:
        payload = payload[match.end():]
    elif payload.startswith("data:"):
        raise ValueError("Only base64 data URLs are supported")
    payload = "".join(payload.split())
    if not payload:
        raise ValueError("Image payload is empty")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image payload: {e}") from e


def encode_data_url(data: bytes, media_type: str) -> str:
    """Return ``data:<media_type>;base64,<...>`` for the given bytes."""
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"
