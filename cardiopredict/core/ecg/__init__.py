"""
ECG Module

Synthetic ECG interpretation triggered by an attached recording.
"""
from .simulator import (
    ECGAnalysis,
    ECGSimulator,
    Rhythm,
    STSegment,
    TWave,
    NO_ABNORMALITIES,
    interpret_findings,
)

__all__ = [
    "ECGAnalysis",
    "ECGSimulator",
    "Rhythm",
    "STSegment",
    "TWave",
    "NO_ABNORMALITIES",
    "interpret_findings",
]
