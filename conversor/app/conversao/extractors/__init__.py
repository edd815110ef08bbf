"""Extratores por layout de arquivo de origem."""
from .base import BaseExtractor, ExtractionState
from .payments import PaymentsExtractor
from .receipts import ReceiptsExtractor
from .sicredi import SicrediExtractor

__all__ = [
    "BaseExtractor",
    "ExtractionState",
    "SicrediExtractor",
    "PaymentsExtractor",
    "ReceiptsExtractor",
]
