"""
Report Generation Module

Generates downloadable PDF reports for risk predictions.
"""
from .prediction_report import PredictionReportGenerator, PredictionReport

__all__ = [
    "PredictionReportGenerator",
    "PredictionReport",
]
