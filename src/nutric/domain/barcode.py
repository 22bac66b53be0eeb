"""Domain models for barcode scanning."""

from dataclasses import dataclass
from enum import StrEnum

from nutric.domain.records import CanonicalFoodRecord


class BarcodeState(StrEnum):
    """States of a barcode resolution session."""

    IDLE = "IDLE"
    RESOLVING = "RESOLVING"
    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ScanEvent:
    """Detection emitted by the camera decoder."""

    code: str
    symbology: str


@dataclass
class BarcodeSession:
    """Transient state of one scanning surface."""

    state: BarcodeState = BarcodeState.IDLE
    last_code: str = ""
    last_resolved_at_millis: int = 0
    record: CanonicalFoodRecord | None = None
    message: str | None = None
    active: bool = False
    transition: int = 0
