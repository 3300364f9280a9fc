"""
Risk Factor Ranker

Derives human-readable risk factors directly from patient attributes,
independently of the scoring models.
"""
from dataclasses import dataclass
from typing import List, Optional

from cardiopredict.core.ecg import ECGAnalysis
from cardiopredict.core.patient import PatientAttributes, ExerciseLevel

ECG_ABNORMALITY = "ECG Abnormality"
MAX_ATTRIBUTE_FACTORS = 4
MAX_FACTORS = 5


@dataclass(frozen=True)
class RiskFactor:
    """A triggered risk factor and its ranking weight."""
    label: str
    weight: float


class RiskFactorRanker:
    """Ranks the clinical attributes that exceed their thresholds."""

    def candidates(self, patient: PatientAttributes) -> List[RiskFactor]:
        """Triggered factors in declaration order (unsorted)."""
        p = patient
        factors: List[RiskFactor] = []
        if p.age > 45:
            factors.append(RiskFactor("Age > 45", p.age - 45))
        if p.systolic_bp > 130:
            factors.append(RiskFactor("High Blood Pressure", (p.systolic_bp - 130) * 0.5))
        if p.cholesterol > 240:
            factors.append(RiskFactor("High Cholesterol", (p.cholesterol - 240) * 0.3))
        if p.ldl > 130:
            factors.append(RiskFactor("High LDL", (p.ldl - 130) * 0.3))
        if p.hdl < 40:
            factors.append(RiskFactor("Low HDL", (40 - p.hdl) * 0.4))
        if p.bmi > 30:
            factors.append(RiskFactor("Obesity (BMI > 30)", (p.bmi - 30) * 1.2))
        elif p.bmi > 25:
            factors.append(RiskFactor("Overweight", (p.bmi - 25) * 0.8))
        if p.smoking:
            factors.append(RiskFactor("Smoking", 15))
        if p.family_history:
            factors.append(RiskFactor("Family History", 10))
        if p.blood_sugar > 126:
            factors.append(RiskFactor("High Blood Sugar", 12))
        if p.exercise == ExerciseLevel.NONE:
            factors.append(RiskFactor("Sedentary Lifestyle", 7))
        return factors

    def rank(self, patient: PatientAttributes, ecg: Optional[ECGAnalysis] = None) -> List[str]:
        """
        Top risk factor labels, most important first.

        Attribute factors are sorted by descending weight (ties keep
        declaration order) and cut to four. An abnormal ECG puts
        "ECG Abnormality" in front. At most five unique labels are returned.
        """
        ranked = sorted(self.candidates(patient), key=lambda f: f.weight, reverse=True)
        labels = [f.label for f in ranked[:MAX_ATTRIBUTE_FACTORS]]

        if ecg is not None and ecg.is_abnormal:
            labels.insert(0, ECG_ABNORMALITY)

        unique: List[str] = []
        for label in labels:
            if label not in unique:
                unique.append(label)
        return unique[:MAX_FACTORS]
