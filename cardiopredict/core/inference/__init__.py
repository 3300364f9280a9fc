"""
Inference Module

Computes cardiovascular risk scores from patient attributes with four scoring
models, an ECG-aware ensemble and a risk factor ranking.
"""
from .risk_engine import RiskLevel, ModelScore, PredictionResult, classify
from .scoring import ModelSpec, ScoringModel, MODEL_SPECS
from .ensemble import EnsembleAggregator
from .risk_factors import RiskFactorRanker, RiskFactor
from .predictor import PredictionOrchestrator

__all__ = [
    "RiskLevel",
    "ModelScore",
    "PredictionResult",
    "classify",
    "ModelSpec",
    "ScoringModel",
    "MODEL_SPECS",
    "EnsembleAggregator",
    "RiskFactorRanker",
    "RiskFactor",
    "PredictionOrchestrator",
]
