"""
Ensemble Aggregator

Folds the ECG risk contribution into each model score and combines the
models into a confidence-weighted ensemble score.
"""
from typing import List, Tuple

from cardiopredict.core.random_source import RandomSource, round_half_up
from cardiopredict.core.inference.risk_engine import ModelScore, RiskLevel, clamp_score
from cardiopredict.utils import get_logger

logger = get_logger(__name__)

BOOST_MULTIPLIER_MIN = 0.7
BOOST_MULTIPLIER_SPAN = 0.6


class EnsembleAggregator:
    """Combines model outputs into a single ensemble score."""

    def __init__(self, random_source: RandomSource):
        self._random = random_source

    def apply_ecg_boost(self, predictions: List[ModelScore], contribution: int) -> List[int]:
        """
        Add the ECG contribution to every model score in place.

        Each model draws its own multiplier in [0.7, 1.3), so models can
        disagree on how much the same ECG finding matters. Nothing is drawn
        when the contribution is 0.

        Returns:
            Points added to each model, in order
        """
        if contribution <= 0:
            return []

        added = []
        for prediction in predictions:
            multiplier = BOOST_MULTIPLIER_MIN + self._random.random() * BOOST_MULTIPLIER_SPAN
            points = round_half_up(contribution * multiplier)
            prediction.apply_boost(points)
            added.append(points)

        logger.debug(f"ECG boost of {contribution} applied as {added}")
        return added

    def combine(self, predictions: List[ModelScore]) -> Tuple[int, RiskLevel]:
        """Confidence-weighted mean of the model scores, rounded."""
        total_confidence = sum(p.confidence for p in predictions)
        if total_confidence > 0:
            mean = sum(p.risk_score * p.confidence for p in predictions) / total_confidence
        elif predictions:
            mean = sum(p.risk_score for p in predictions) / len(predictions)
        else:
            mean = 0.0

        ensemble_score = round_half_up(clamp_score(mean))
        return ensemble_score, RiskLevel.from_score(ensemble_score)

    def aggregate(self, predictions: List[ModelScore], ecg_contribution: int = 0) -> Tuple[int, RiskLevel]:
        """Apply the ECG boost (if any), then combine."""
        self.apply_ecg_boost(predictions, ecg_contribution)
        return self.combine(predictions)
