"""Scanner - Cached discovery of the project IDs below a root group."""

from groupwatch.scanner.cache import SCANNED_DATA_KEY, ScanCache
from groupwatch.scanner.models import ScanInfo, ScanRecord
from groupwatch.scanner.scanner import Scanner

__all__ = [
    "SCANNED_DATA_KEY",
    "ScanCache",
    "ScanInfo",
    "ScanRecord",
    "Scanner",
]
