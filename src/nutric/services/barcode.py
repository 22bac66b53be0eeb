"""Barcode resolution session driven by decoder detections."""

import asyncio
import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from nutric.domain.barcode import BarcodeSession, BarcodeState, ScanEvent
from nutric.domain.records import CanonicalFoodRecord
from nutric.services.catalog import CatalogError, CatalogService

_logger = logging.getLogger(__name__)

DEBOUNCE_MILLIS = 3000
FOUND_DISPLAY_SECONDS = 3.0
NOT_FOUND_DISPLAY_SECONDS = 2.0
ERROR_DISPLAY_SECONDS = 2.0

_VALID_BARCODE_LENGTHS = {8, 12, 13, 14}
_NON_DIGITS = re.compile(r"\D")

Scheduler = Callable[[float, Callable[[], None]], object]


def clean_barcode(code: str) -> str:
    """Strip everything but digits from a scanned code."""
    return _NON_DIGITS.sub("", code)


def is_valid_barcode(code: str) -> bool:
    """Return True for EAN-8, UPC-A, EAN-13 and GTIN-14 lengths."""
    return len(clean_barcode(code)) in _VALID_BARCODE_LENGTHS


def _monotonic_millis() -> int:
    return int(time.monotonic() * 1000)


def _loop_scheduler(delay_seconds: float, callback: Callable[[], None]) -> object:
    return asyncio.get_running_loop().call_later(delay_seconds, callback)


@dataclass
class BarcodeScanner:
    """State machine for one scanning surface.

    IDLE -> RESOLVING -> FOUND | NOT_FOUND | ERROR, and back to IDLE once the
    display window of the terminal state elapses while scanning is active.
    """

    catalog_service: CatalogService
    now_millis: Callable[[], int] = _monotonic_millis
    schedule: Scheduler = _loop_scheduler
    on_found: Callable[[CanonicalFoodRecord], None] | None = None
    session: BarcodeSession = field(default_factory=BarcodeSession)

    def start(self) -> BarcodeSession:
        """Begin scanning with a fresh session."""
        self.session = BarcodeSession(active=True)
        return self.session

    def stop(self) -> None:
        """Stop scanning; pending display timers no longer fire."""
        self.session.active = False

    async def on_detected(self, event: ScanEvent) -> bool:
        """Handle a decoder detection; returns True when a lookup ran."""
        session = self.session
        if not session.active or session.state == BarcodeState.RESOLVING:
            return False
        code = clean_barcode(event.code)
        if not is_valid_barcode(code):
            _logger.debug("Ignoring invalid %s code: %s", event.symbology, event.code)
            return False
        now = self.now_millis()
        if (
            code == session.last_code
            and now - session.last_resolved_at_millis < DEBOUNCE_MILLIS
        ):
            return False

        session.last_code = code
        session.last_resolved_at_millis = now
        session.record = None
        session.message = None
        self._enter(session, BarcodeState.RESOLVING)
        _logger.info("Barcode detected: code=%s symbology=%s", code, event.symbology)

        try:
            record = await self.catalog_service.get_by_code(code)
        except CatalogError:
            session.message = "Error looking up product"
            self._settle(session, BarcodeState.ERROR, ERROR_DISPLAY_SECONDS)
            return True

        if record is None:
            session.message = f"Product not found ({code})"
            self._settle(session, BarcodeState.NOT_FOUND, NOT_FOUND_DISPLAY_SECONDS)
            return True

        session.record = record
        self._settle(session, BarcodeState.FOUND, FOUND_DISPLAY_SECONDS)
        if self.on_found is not None and session.active:
            self.on_found(record)
        return True

    def _enter(self, session: BarcodeSession, state: BarcodeState) -> int:
        session.state = state
        session.transition += 1
        return session.transition

    def _settle(
        self, session: BarcodeSession, state: BarcodeState, display_seconds: float
    ) -> None:
        token = self._enter(session, state)
        if not session.active:
            return
        self.schedule(display_seconds, lambda: self._revert(session, token))

    def _revert(self, session: BarcodeSession, token: int) -> None:
        if session is not self.session or not session.active:
            return
        if session.transition != token:
            return
        session.record = None
        session.message = None
        self._enter(session, BarcodeState.IDLE)
