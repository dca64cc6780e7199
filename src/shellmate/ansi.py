"""ANSI escape-sequence helpers for streaming terminal output."""

ESC = 0x1B
CSI = b"\x1b["

# A CSI sequence ends with a single byte in this range (e.g. 'm', 'D', 'K').
FINAL_BYTE_MIN = 0x40
FINAL_BYTE_MAX = 0x7E


def is_final_byte(byte: int) -> bool:
    return FINAL_BYTE_MIN <= byte <= FINAL_BYTE_MAX


def _pending_start(buf: bytes) -> int:
    """Return the offset of a trailing unterminated CSI sequence, or -1."""
    start = buf.rfind(CSI)
    if start == -1:
        return -1
    for byte in buf[start + len(CSI):]:
        if is_final_byte(byte):
            return -1
    return start


def incomplete_ansi_sequence(buf: bytes) -> bool:
    """Return whether *buf* ends in the middle of a CSI escape sequence.

    Only the last ``ESC [`` introducer matters: any earlier sequence is either
    complete or has already been followed by other bytes.  Parameter bytes
    (digits, ``;`` and friends) keep the sequence open until a final byte in
    ``0x40``-``0x7E`` arrives.
    """
    if ESC not in buf:
        return False
    return _pending_start(buf) != -1


def split_incomplete(buf: bytes) -> tuple[bytes, bytes]:
    """Split *buf* into ``(ready, pending)``.

    ``pending`` holds a trailing incomplete CSI sequence that a streaming
    consumer should keep back until more bytes arrive; it is empty when *buf*
    ends on a sequence boundary.
    """
    if ESC not in buf:
        return buf, b""
    start = _pending_start(buf)
    if start == -1:
        return buf, b""
    return buf[:start], buf[start:]
