import base64
import re
from array import array

from mazemin.core.errors import FormatError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

# Characters outside the alphabet decode as 0 (silent corruption, not an error).
# '=' is padding and also contributes 0 bits.
_LOOKUP = array('B', [0] * 256)
for _i, _ch in enumerate(ALPHABET):
    _LOOKUP[ord(_ch)] = _i

_WHITESPACE = re.compile(r"\s")


def _sextet(ch: str) -> int:
    code = ord(ch)
    return _LOOKUP[code] if code < 256 else 0


def decode_base64(text: str) -> bytes:
    """
    Decodes standard-alphabet Base64 with '=' padding.
    Whitespace is stripped first; the remaining length must be a multiple of 4.
    """
    sanitized = _WHITESPACE.sub("", text)
    if len(sanitized) % 4 != 0:
        raise FormatError(f"Invalid base64 input length: {len(sanitized)}")

    if sanitized.endswith("=="):
        padding = 2
    elif sanitized.endswith("="):
        padding = 1
    else:
        padding = 0
    byte_length = (len(sanitized) // 4) * 3 - padding
    if byte_length <= 0:
        return b""

    out = bytearray(byte_length)
    out_idx = 0
    for i in range(0, len(sanitized), 4):
        a, b, c, d = (_sextet(ch) for ch in sanitized[i:i + 4])
        chunk = (a << 18) | (b << 12) | (c << 6) | d
        out[out_idx] = (chunk >> 16) & 0xFF
        out_idx += 1
        if out_idx < byte_length:
            out[out_idx] = (chunk >> 8) & 0xFF
            out_idx += 1
        if out_idx < byte_length:
            out[out_idx] = chunk & 0xFF
            out_idx += 1

    return bytes(out)


def encode_base64(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")
