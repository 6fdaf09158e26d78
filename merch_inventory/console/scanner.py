# merch_inventory/console/scanner.py
"""Scan-to-consume input.

A :class:`ScanSession` wraps a :class:`CodeReader` (camera decoder, USB
keyboard-wedge scanner, ...) and exposes the decoded codes as a lazy stream of
:class:`ScanEvent` objects. The session is started and stopped explicitly;
stopping, closing the event generator or leaving the ``with`` block always
closes the reader, which releases the underlying device.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import IO, Iterator, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "SKU:"


class DecodeError(Exception):
    """A frame was read but held no decodable code."""


class CodeReader(Protocol):
    def open(self) -> None: ...

    def read(self) -> Optional[str]:
        """Return the next decoded payload, ``None`` if nothing was decoded.

        Raises ``EOFError`` when the source is exhausted.
        """
        ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class ScanEvent:
    sku: str
    raw: str
    scanned_at: datetime
    generation: int


def parse_scan_payload(text: Optional[str], prefix: str = DEFAULT_PREFIX) -> Optional[str]:
    """Turn a decoded payload (``"SKU:TS-1"`` or ``"TS-1"``) into a SKU."""
    if text is None:
        return None
    text = text.strip()
    if prefix and text.startswith(prefix):
        text = text[len(prefix):].strip()
    return text or None


class LineCodeReader:
    """Reads one payload per line from a text stream (keyboard-wedge scanners, stdin)."""

    def __init__(self, stream: IO[str], close_stream: bool = False):
        self._stream = stream
        self._close_stream = close_stream
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def read(self) -> Optional[str]:
        if not self.is_open:
            raise EOFError("reader closed")
        line = self._stream.readline()
        if line == "":
            raise EOFError
        return line.strip() or None

    def close(self) -> None:
        if self.is_open and self._close_stream:
            self._stream.close()
        self.is_open = False


class ScanSession:
    def __init__(self, reader: CodeReader, prefix: str = DEFAULT_PREFIX):
        self._reader = reader
        self.prefix = prefix
        self.generation = 0
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._active:
            return
        self._reader.open()
        self._active = True
        self.generation += 1
        logger.debug("Scan session %s started", self.generation)

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        try:
            self._reader.close()
        finally:
            logger.debug("Scan session %s stopped", self.generation)

    def is_current(self, event: ScanEvent) -> bool:
        """False once the session that produced ``event`` was stopped or restarted."""
        return self._active and event.generation == self.generation

    def events(self) -> Iterator[ScanEvent]:
        if not self._active:
            raise RuntimeError("scan session is not started")
        return self._events(self.generation)

    def _events(self, generation: int) -> Iterator[ScanEvent]:
        try:
            while self._active and self.generation == generation:
                try:
                    raw = self._reader.read()
                except DecodeError:
                    continue
                except EOFError:
                    return
                sku = parse_scan_payload(raw, self.prefix)
                if sku is None:
                    continue
                yield ScanEvent(sku=sku, raw=raw, scanned_at=datetime.now(timezone.utc), generation=generation)
        finally:
            # A restarted session belongs to a newer generation; leave it running
            if self.generation == generation:
                self.stop()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()
