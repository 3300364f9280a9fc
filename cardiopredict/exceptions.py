"""
Exception types raised by the collaborators around the risk engine.

The engine itself has no failure path; these cover storage and reporting.
"""


class CardioPredictError(Exception):
    """Base class for all package errors."""


class PredictionNotFoundError(CardioPredictError):
    """No stored prediction has the requested id."""

    def __init__(self, prediction_id: str):
        self.prediction_id = prediction_id
        super().__init__(f"Prediction not found: {prediction_id}")


class StorageError(CardioPredictError):
    """The history store could not write or read a record."""


class ReportGenerationError(CardioPredictError):
    """The PDF report could not be produced."""
