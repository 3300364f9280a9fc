"""
Patient Data Structures

Clinical inputs consumed by the risk engine.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Any
from enum import Enum


class Sex(str, Enum):
    """Biological sex category."""
    MALE = "male"
    FEMALE = "female"


class ExerciseLevel(str, Enum):
    """Weekly exercise level, ordered from least to most active."""
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"

    @classmethod
    def from_string(cls, name: str) -> "ExerciseLevel":
        """Parse exercise level with common aliases."""
        name_lower = name.strip().lower()
        mapping = {
            "sedentary": cls.NONE,
            "inactive": cls.NONE,
            "low": cls.LIGHT,
            "medium": cls.MODERATE,
            "high": cls.HEAVY,
            "intense": cls.HEAVY,
        }
        if name_lower in mapping:
            return mapping[name_lower]
        return cls(name_lower)


@dataclass(frozen=True)
class PatientAttributes:
    """
    Clinical attributes for one risk prediction.

    Values are not range-checked: out-of-range numbers flow through the
    scoring arithmetic and are clamped only at the score boundary.
    ``has_ecg`` marks that an ECG recording was supplied; its content is
    never read.
    """
    age: int
    sex: Sex
    systolic_bp: float
    diastolic_bp: float
    cholesterol: float
    hdl: float
    ldl: float
    blood_sugar: float
    bmi: float
    smoking: bool = False
    family_history: bool = False
    exercise: ExerciseLevel = ExerciseLevel.NONE
    has_ecg: bool = False

    def __post_init__(self):
        # Accept plain strings for the categorical fields
        if not isinstance(self.sex, Sex):
            object.__setattr__(self, "sex", Sex(str(self.sex).lower()))
        if not isinstance(self.exercise, ExerciseLevel):
            object.__setattr__(self, "exercise", ExerciseLevel.from_string(str(self.exercise)))

    @property
    def is_male(self) -> bool:
        return self.sex == Sex.MALE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with enum values flattened."""
        data = asdict(self)
        data["sex"] = self.sex.value
        data["exercise"] = self.exercise.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatientAttributes":
        """Build from a dictionary, ignoring unknown keys."""
        fields = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in fields})
