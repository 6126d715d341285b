import logging
from typing import List, Optional, Sequence

from mazemin.core.errors import FormatError
from mazemin.core.openings import (
    expanded_to_openings,
    normalize_openings,
    openings_to_expanded,
)
from mazemin.io.base64_codec import decode_base64, encode_base64
from mazemin.io.payload import PayloadDecoder, encode_json_payload

logger = logging.getLogger(__name__)


def decode_openings(payload: str, width: int, height: int,
                    decoder: Optional[PayloadDecoder] = None) -> List[int]:
    """
    Grid payload -> width*height opening masks.

    Preferred: compressed JSON expanded grid, normalized afterwards.
    Fallback: legacy nibble-packed masks (returned as stored).
    Raises FormatError when neither yields a full grid.
    """
    decoder = decoder or PayloadDecoder()
    parsed = decoder.try_decode(payload)

    if isinstance(parsed, list) and parsed and isinstance(parsed[0], list):
        try:
            openings = expanded_to_openings(parsed, width, height)
        except FormatError as exc:
            # DimensionMismatchError included
            logger.warning("Expanded grid rejected for %dx%d maze: %s", width, height, exc)
        else:
            return normalize_openings(openings, width, height)

    return unpack_openings(payload, width, height)


def unpack_openings(payload: str, width: int, height: int) -> List[int]:
    # Two masks per byte, low nibble first, row-major
    total = width * height
    data = decode_base64(payload)
    if len(data) * 2 < total:
        raise FormatError(
            f"Packed grid holds {len(data) * 2} cells, {width}x{height} needs {total}"
        )

    openings: List[int] = []
    for byte in data:
        openings.append(byte & 0x0F)
        if len(openings) >= total:
            break
        openings.append(byte >> 4)
        if len(openings) >= total:
            break
    return openings


def pack_openings(openings: Sequence[int]) -> str:
    packed = bytearray((len(openings) + 1) // 2)
    for index, mask in enumerate(openings):
        if index % 2 == 0:
            packed[index // 2] = mask & 0x0F
        else:
            packed[index // 2] |= (mask & 0x0F) << 4
    return encode_base64(bytes(packed))


def encode_openings(openings: Sequence[int], width: int, height: int,
                    compress: bool = True) -> str:
    """Authoring side: opening masks -> compressed JSON expanded grid."""
    expanded = openings_to_expanded(openings, width, height)
    return encode_json_payload(expanded.tolist(), compress=compress)
