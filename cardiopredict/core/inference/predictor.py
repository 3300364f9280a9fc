"""
Prediction Orchestrator

Single entry point of the risk engine: runs the ECG simulator (when a
recording is attached), every scoring model, the ECG boost, the ensemble
aggregator and the risk factor ranker, and returns one PredictionResult.
"""
from typing import List, Optional, Tuple

from cardiopredict.core.ecg import ECGAnalysis, ECGSimulator
from cardiopredict.core.patient import PatientAttributes
from cardiopredict.core.random_source import RandomSource, NumpyRandomSource
from cardiopredict.core.inference.ensemble import EnsembleAggregator
from cardiopredict.core.inference.risk_engine import PredictionResult
from cardiopredict.core.inference.risk_factors import RiskFactorRanker
from cardiopredict.core.inference.scoring import ModelSpec, build_models
from cardiopredict.utils import get_logger

logger = get_logger(__name__)


class PredictionOrchestrator:
    """
    Facade over the scoring models, ECG simulator, aggregator and ranker.

    The orchestrator keeps no per-call state. Calls are re-entrant as long as
    the injected RandomSource is safe to share (NumpyRandomSource is).
    """

    def __init__(
        self,
        random_source: Optional[RandomSource] = None,
        model_specs: Optional[Tuple[ModelSpec, ...]] = None
    ):
        self.random_source = random_source or NumpyRandomSource()
        self.models = build_models(self.random_source, model_specs)
        self.ecg_simulator = ECGSimulator(self.random_source)
        self.aggregator = EnsembleAggregator(self.random_source)
        self.ranker = RiskFactorRanker()
        logger.info(f"PredictionOrchestrator initialized with {len(self.models)} models")

    @property
    def model_names(self) -> List[str]:
        return [m.name for m in self.models]

    def predict(self, patient: PatientAttributes, ecg_requested: Optional[bool] = None) -> PredictionResult:
        """
        Run a full risk prediction.

        Args:
            patient: Clinical attributes (not range-checked)
            ecg_requested: Simulate an ECG interpretation; defaults to
                ``patient.has_ecg``

        Returns:
            PredictionResult with one score per model in declaration order
        """
        if ecg_requested is None:
            ecg_requested = patient.has_ecg

        ecg: Optional[ECGAnalysis] = self.ecg_simulator.simulate() if ecg_requested else None
        contribution = ecg.risk_contribution if ecg else 0

        predictions = [model.score(patient) for model in self.models]
        ensemble_score, ensemble_level = self.aggregator.aggregate(predictions, contribution)
        top_factors = self.ranker.rank(patient, ecg)

        logger.debug(
            f"Prediction complete: ensemble={ensemble_score} ({ensemble_level.value}), "
            f"ecg={'yes' if ecg else 'no'}, factors={len(top_factors)}"
        )

        return PredictionResult(
            predictions=predictions,
            ensemble_score=ensemble_score,
            top_risk_factors=top_factors,
            ecg_analysis=ecg,
        )
