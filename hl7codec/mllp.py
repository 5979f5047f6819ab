"""
MLLP (Minimal Lower Layer Protocol) framing.

A framed message looks like ``<VT>payload<FS><CR>``. These helpers only
add or remove the envelope; nothing here touches a socket. Every
function accepts either ``str`` or ``bytes`` and returns the same type.
"""

import re
from typing import List, Union

START_BLOCK = "\x0b"  # VT
END_BLOCK = "\x1c"  # FS
CARRIAGE_RETURN = "\x0d"  # CR

_FRAMED_TEXT = re.compile(r"\x0b(.*)\x1c\r", re.DOTALL)
_FRAMED_BYTES = re.compile(rb"\x0b(.*)\x1c\r", re.DOTALL)

Payload = Union[str, bytes]


def _envelope(data: Payload):
    if isinstance(data, bytes):
        return (
            START_BLOCK.encode("ascii"),
            (END_BLOCK + CARRIAGE_RETURN).encode("ascii"),
            _FRAMED_BYTES,
        )
    return START_BLOCK, END_BLOCK + CARRIAGE_RETURN, _FRAMED_TEXT


def wrap_mllp(payload: Payload) -> Payload:
    """Wrap a payload in the MLLP start and end blocks."""
    start, end, _ = _envelope(payload)
    return start + payload + end


def is_mllp_framed(data: Payload) -> bool:
    """Return True if ``data`` contains an MLLP-framed payload."""
    _, _, pattern = _envelope(data)
    return pattern.search(data) is not None


def strip_mllp(data: Payload) -> Payload:
    """
    Remove MLLP framing if present.

    Framing is optional: data without an envelope is returned unchanged.

    Args:
        data: Possibly framed message text or bytes

    Returns:
        The payload between the start block and the end block
    """
    _, _, pattern = _envelope(data)
    match = pattern.search(data)
    if match is None:
        return data
    return match.group(1)


def split_mllp_stream(data: Payload) -> List[Payload]:
    """
    Split a buffer holding several framed messages into their payloads.

    Bytes outside of a frame (typically stray CR/LF between frames) are
    ignored. An unterminated trailing frame is not returned.

    Args:
        data: Buffer with zero or more framed messages

    Returns:
        List of payloads in arrival order
    """
    start, end, _ = _envelope(data)
    payloads = []

    for chunk in data.split(end)[:-1]:
        position = chunk.find(start)
        if position == -1:
            continue
        payloads.append(chunk[position + 1:])

    return payloads
