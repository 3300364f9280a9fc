"""
Risk Engine Module

Risk levels, per-model scores and the composite prediction result.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from enum import Enum
import numpy as np

from cardiopredict.core.ecg import ECGAnalysis
from cardiopredict.core.random_source import round_half_up

SCORE_MIN = 0
SCORE_MAX = 100


class RiskLevel(str, Enum):
    """Risk level categories."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def from_score(cls, score: float) -> "RiskLevel":
        """Convert numeric score (0-100) to risk level. Lower bounds are inclusive."""
        if score < 25:
            return cls.LOW
        elif score < 50:
            return cls.MODERATE
        elif score < 75:
            return cls.HIGH
        else:
            return cls.CRITICAL


def classify(score: float) -> RiskLevel:
    """Band a score into one of the four risk levels."""
    return RiskLevel.from_score(score)


def clamp_score(value: float) -> float:
    """Saturate a raw score into [0, 100]."""
    return float(np.clip(value, SCORE_MIN, SCORE_MAX))


@dataclass
class ModelScore:
    """Output of one scoring model."""
    model_name: str
    model_type: str
    risk_score: int  # 0-100 scale
    confidence: int  # 0-100 scale

    @property
    def risk_level(self) -> RiskLevel:
        """Get categorical risk level for the current score."""
        return RiskLevel.from_score(self.risk_score)

    def apply_boost(self, points: int) -> None:
        """Add points to the score, saturating at the score bounds."""
        self.risk_score = round_half_up(clamp_score(self.risk_score + points))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "model_name": self.model_name,
            "model_type": self.model_type,
            "risk_score": self.risk_score,
            "confidence": self.confidence,
            "risk_level": self.risk_level.value,
        }

    def summary(self) -> Dict[str, Any]:
        """Compact form stored with each history record."""
        return {
            "model_name": self.model_name,
            "risk_score": self.risk_score,
            "confidence": self.confidence,
            "risk_level": self.risk_level.value,
        }


@dataclass
class PredictionResult:
    """Complete risk assessment for one patient."""
    predictions: List[ModelScore]
    ensemble_score: int
    top_risk_factors: List[str] = field(default_factory=list)
    ecg_analysis: Optional[ECGAnalysis] = None

    @property
    def ensemble_risk_level(self) -> RiskLevel:
        return RiskLevel.from_score(self.ensemble_score)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "predictions": [p.to_dict() for p in self.predictions],
            "ensemble_score": self.ensemble_score,
            "ensemble_risk_level": self.ensemble_risk_level.value,
            "top_risk_factors": list(self.top_risk_factors),
            "ecg_analysis": self.ecg_analysis.to_dict() if self.ecg_analysis else None,
        }
