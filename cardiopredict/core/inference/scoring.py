"""
Scoring Models

Four fixed scoring heuristics, each a weighted sum of thresholded patient
attributes plus one uniform noise draw. The heuristics are declared as data
(``MODEL_SPECS``) and evaluated by a single ``ScoringModel``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from cardiopredict.core.patient import PatientAttributes, ExerciseLevel
from cardiopredict.core.random_source import RandomSource, round_half_up
from cardiopredict.core.inference.risk_engine import ModelScore, clamp_score
from cardiopredict.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ThresholdTerm:
    """
    Linear penalty for the distance past a baseline, floored at zero.

    With ``inverse`` set, values *below* the baseline are penalized (HDL).
    """
    attribute: str
    baseline: float
    coefficient: float
    inverse: bool = False

    def contribution(self, patient: PatientAttributes) -> float:
        value = getattr(patient, self.attribute)
        excess = self.baseline - value if self.inverse else value - self.baseline
        return max(0.0, excess * self.coefficient)


@dataclass(frozen=True)
class StepTerm:
    """Flat points for the highest threshold the value exceeds."""
    attribute: str
    steps: Tuple[Tuple[float, float], ...]  # (threshold, points), highest threshold first

    def contribution(self, patient: PatientAttributes) -> float:
        value = getattr(patient, self.attribute)
        for threshold, points in self.steps:
            if value > threshold:
                return points
        return 0.0


Term = Union[ThresholdTerm, StepTerm]


@dataclass(frozen=True)
class ModelSpec:
    """Coefficient set for one scoring model."""
    name: str
    model_type: str
    terms: Tuple[Term, ...]
    male_points: float
    smoking_points: float
    family_history_points: float
    exercise_points: Dict[ExerciseLevel, float] = field(default_factory=dict)
    noise_amplitude: float = 3.0  # noise is uniform in [-A, +A)
    base_confidence: int = 80
    confidence_range: int = 10


MODEL_SPECS: Tuple[ModelSpec, ...] = (
    ModelSpec(
        name="Logistic Regression",
        model_type="Linear",
        terms=(
            ThresholdTerm("age", 30, 0.8),
            ThresholdTerm("systolic_bp", 120, 0.3),
            ThresholdTerm("cholesterol", 200, 0.08),
            ThresholdTerm("bmi", 25, 1.5),
            ThresholdTerm("blood_sugar", 100, 0.15),
        ),
        male_points=5,
        smoking_points=12,
        family_history_points=8,
        exercise_points={ExerciseLevel.NONE: 6, ExerciseLevel.LIGHT: 3},
        noise_amplitude=3.0,
        base_confidence=78,
        confidence_range=10,
    ),
    ModelSpec(
        name="Random Forest",
        model_type="Ensemble",
        terms=(
            ThresholdTerm("age", 35, 0.7),
            ThresholdTerm("systolic_bp", 120, 0.35),
            ThresholdTerm("cholesterol", 190, 0.09),
            ThresholdTerm("ldl", 100, 0.12),
            ThresholdTerm("bmi", 24, 1.8),
        ),
        male_points=4,
        smoking_points=15,
        family_history_points=10,
        exercise_points={
            ExerciseLevel.NONE: 7,
            ExerciseLevel.LIGHT: 2,
            ExerciseLevel.MODERATE: -3,
            ExerciseLevel.HEAVY: -3,
        },
        noise_amplitude=4.0,
        base_confidence=82,
        confidence_range=8,
    ),
    ModelSpec(
        name="Neural Network",
        model_type="Deep Learning",
        terms=(
            ThresholdTerm("age", 28, 0.9),
            ThresholdTerm("systolic_bp", 115, 0.28),
            ThresholdTerm("diastolic_bp", 75, 0.25),
            ThresholdTerm("cholesterol", 180, 0.07),
            ThresholdTerm("hdl", 50, 0.2, inverse=True),
            ThresholdTerm("bmi", 23, 1.4),
            StepTerm("blood_sugar", ((126, 8), (100, 4))),
        ),
        male_points=6,
        smoking_points=14,
        family_history_points=9,
        noise_amplitude=2.5,
        base_confidence=85,
        confidence_range=7,
    ),
    ModelSpec(
        name="SVM",
        model_type="Kernel",
        terms=(
            ThresholdTerm("age", 32, 0.75),
            ThresholdTerm("systolic_bp", 118, 0.32),
            ThresholdTerm("cholesterol", 195, 0.085),
            ThresholdTerm("bmi", 25, 1.6),
        ),
        male_points=5,
        smoking_points=13,
        family_history_points=9,
        exercise_points={ExerciseLevel.NONE: 5, ExerciseLevel.HEAVY: -2},
        noise_amplitude=3.5,
        base_confidence=76,
        confidence_range=12,
    ),
)


class ScoringModel:
    """
    Evaluates one ModelSpec against patient attributes.

    Consumes two draws per call: score noise, then confidence.
    """

    def __init__(self, spec: ModelSpec, random_source: RandomSource):
        self.spec = spec
        self._random = random_source

    @property
    def name(self) -> str:
        return self.spec.name

    def raw_score(self, patient: PatientAttributes) -> float:
        """Deterministic part of the score (no noise, no clamping)."""
        spec = self.spec
        score = sum(term.contribution(patient) for term in spec.terms)
        if patient.is_male:
            score += spec.male_points
        if patient.smoking:
            score += spec.smoking_points
        if patient.family_history:
            score += spec.family_history_points
        score += spec.exercise_points.get(patient.exercise, 0)
        return score

    def score(self, patient: PatientAttributes) -> ModelScore:
        spec = self.spec
        noise = self._random.random() * 2 * spec.noise_amplitude - spec.noise_amplitude
        risk = clamp_score(self.raw_score(patient) + noise)
        confidence = spec.base_confidence + round_half_up(spec.confidence_range * self._random.random())

        result = ModelScore(
            model_name=spec.name,
            model_type=spec.model_type,
            risk_score=round_half_up(risk),
            confidence=confidence,
        )
        logger.debug(f"{spec.name}: score={result.risk_score}, confidence={confidence}")
        return result


def build_models(
    random_source: RandomSource,
    specs: Optional[Tuple[ModelSpec, ...]] = None
) -> List[ScoringModel]:
    """Instantiate one ScoringModel per spec, in declaration order."""
    return [ScoringModel(spec, random_source) for spec in (specs or MODEL_SPECS)]
