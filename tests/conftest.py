"""
Shared fixtures for the CardioPredict test suite.
"""
import pytest

from cardiopredict.core.patient import PatientAttributes, Sex, ExerciseLevel
from cardiopredict.core.random_source import SequenceRandomSource


# With every draw at 0.5 the model noise is exactly zero and the ECG boost
# multiplier is exactly 1.0, so scores equal the rounded deterministic sums.
EXAMPLE_SCORES_AT_MIDPOINT = {
    "Logistic Regression": (49, 83),   # (risk_score, confidence)
    "Random Forest": (54, 86),
    "Neural Network": (64, 89),
    "SVM": (45, 82),
}
EXAMPLE_ENSEMBLE_AT_MIDPOINT = 53


@pytest.fixture
def example_patient() -> PatientAttributes:
    """Default form values: 52-year-old male, family history, light exercise."""
    return PatientAttributes(
        age=52,
        sex=Sex.MALE,
        systolic_bp=138,
        diastolic_bp=88,
        cholesterol=245,
        hdl=42,
        ldl=155,
        blood_sugar=110,
        bmi=28.5,
        smoking=False,
        family_history=True,
        exercise=ExerciseLevel.LIGHT,
    )


@pytest.fixture
def healthy_patient() -> PatientAttributes:
    """Young, active, non-smoking female with normal labs."""
    return PatientAttributes(
        age=25,
        sex=Sex.FEMALE,
        systolic_bp=110,
        diastolic_bp=70,
        cholesterol=160,
        hdl=65,
        ldl=90,
        blood_sugar=85,
        bmi=21.0,
        smoking=False,
        family_history=False,
        exercise=ExerciseLevel.HEAVY,
    )


@pytest.fixture
def midpoint_source() -> SequenceRandomSource:
    """Every draw returns 0.5."""
    return SequenceRandomSource([0.5])


@pytest.fixture
def midpoint_scores():
    """Expected (risk_score, confidence) per model for example_patient at u=0.5."""
    return dict(EXAMPLE_SCORES_AT_MIDPOINT)
