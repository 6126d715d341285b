import json
import logging
import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from mazemin.core.errors import FormatError
from mazemin.io.base64_codec import decode_base64, encode_base64

logger = logging.getLogger(__name__)


class InflaterState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DEGRADED = "degraded"


class Inflater:
    """
    Wraps the generic DEFLATE/zlib primitive. Injected into PayloadDecoder
    instead of living as module state. With no primitive the inflater goes
    DEGRADED and the compressed strategy simply reports failure.
    """

    def __init__(self, primitive: Optional[Callable[[bytes], bytes]] = zlib.decompress):
        self._primitive = primitive
        self.state = InflaterState.UNINITIALIZED

    def ensure_ready(self) -> bool:
        if self.state is InflaterState.UNINITIALIZED:
            if callable(self._primitive):
                self.state = InflaterState.READY
            else:
                logger.warning("No inflate primitive available, compressed payloads disabled")
                self.state = InflaterState.DEGRADED
        return self.state is InflaterState.READY

    def inflate(self, data: bytes) -> bytes:
        if not self.ensure_ready():
            raise FormatError("Inflate primitive unavailable")
        try:
            return self._primitive(data)
        except Exception as exc:
            # Injected primitives may raise anything
            raise FormatError(f"Inflate failed: {exc}") from exc


@dataclass(frozen=True)
class DecodeResult:
    strategy: str
    ok: bool
    value: Any = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, strategy: str, value: Any) -> "DecodeResult":
        return cls(strategy, True, value)

    @classmethod
    def failure(cls, strategy: str, reason: str) -> "DecodeResult":
        return cls(strategy, False, None, reason)


def _parse_json_bytes(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise FormatError(f"Not JSON: {exc}") from exc
    except RecursionError as exc:
        raise FormatError("JSON nested too deeply") from exc


class PayloadDecoder:
    """
    Base64 text -> JSON value, trying each named strategy in order:

        zlib-json : inflate, UTF-8 decode, JSON parse
        raw-json  : UTF-8 decode the raw bytes, JSON parse

    Strategies return tagged results and never raise. Legacy packed
    formats are not handled here; callers fall back to them on failure.
    """

    def __init__(self, inflater: Optional[Inflater] = None):
        self.inflater = inflater if inflater is not None else Inflater()
        self.strategies: List[Tuple[str, Callable[[bytes], Any]]] = [
            ("zlib-json", self._inflate_json),
            ("raw-json", _parse_json_bytes),
        ]
        self.last_result: Optional[DecodeResult] = None

    def _inflate_json(self, raw: bytes) -> Any:
        return _parse_json_bytes(self.inflater.inflate(raw))

    def decode(self, text: str) -> DecodeResult:
        try:
            raw = decode_base64(text)
        except FormatError as exc:
            self.last_result = DecodeResult.failure("base64", str(exc))
            logger.debug("Payload rejected: %s", exc)
            return self.last_result

        failures = []
        for name, strategy in self.strategies:
            try:
                value = strategy(raw)
            except FormatError as exc:
                failures.append(f"{name}: {exc}")
                continue
            self.last_result = DecodeResult.success(name, value)
            logger.debug("Payload decoded with %s", name)
            return self.last_result

        self.last_result = DecodeResult.failure("none", "; ".join(failures))
        logger.debug("Payload not JSON (%s)", self.last_result.reason)
        return self.last_result

    def try_decode(self, text: str) -> Any:
        result = self.decode(text)
        return result.value if result.ok else None


def try_decode(text: str, decoder: Optional[PayloadDecoder] = None) -> Any:
    return (decoder or PayloadDecoder()).try_decode(text)


def encode_json_payload(value: Any, compress: bool = True) -> str:
    data = json.dumps(value, separators=(",", ":")).encode("utf-8")
    if compress:
        data = zlib.compress(data)
    return encode_base64(data)
