"""
Prediction API Models
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, Any, List, Optional

from cardiopredict.core.patient import PatientAttributes, Sex, ExerciseLevel


class PredictionRequest(BaseModel):
    """Patient inputs for a risk prediction. Values are not range-checked."""
    age: int = Field(..., description="Age in years")
    sex: Sex
    systolic_bp: float = Field(..., description="Systolic blood pressure (mmHg)")
    diastolic_bp: float = Field(..., description="Diastolic blood pressure (mmHg)")
    cholesterol: float = Field(..., description="Total cholesterol (mg/dL)")
    hdl: float = Field(..., description="HDL cholesterol (mg/dL)")
    ldl: float = Field(..., description="LDL cholesterol (mg/dL)")
    blood_sugar: float = Field(..., description="Fasting blood sugar (mg/dL)")
    bmi: float = Field(..., description="Body-mass index")
    smoking: bool = False
    family_history: bool = Field(default=False, description="Family history of cardiovascular disease")
    exercise: ExerciseLevel = ExerciseLevel.NONE
    has_ecg: bool = Field(default=False, description="An ECG recording was attached")

    def to_patient(self) -> PatientAttributes:
        return PatientAttributes(**self.model_dump())


class ModelScoreResponse(BaseModel):
    """Response for one scoring model."""
    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    model_type: str
    risk_score: int
    confidence: int
    risk_level: str


class ECGAnalysisResponse(BaseModel):
    """Synthetic ECG interpretation."""
    heart_rate: int
    rhythm: str
    pr_interval: int
    qrs_duration: int
    qt_interval: int
    st_segment: str
    t_wave: str
    findings: List[str]
    risk_contribution: int


class PredictionResponse(BaseModel):
    """Response from a risk prediction."""
    prediction_id: Optional[str] = None
    timestamp: str
    predictions: List[ModelScoreResponse]
    ensemble_score: int
    ensemble_risk_level: str
    top_risk_factors: List[str]
    ecg_analysis: Optional[ECGAnalysisResponse] = None
    saved: bool = False
    message: Optional[str] = None


class ModelSummary(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    risk_score: int
    confidence: int
    risk_level: str


class HistoryRecordResponse(BaseModel):
    """One stored prediction."""
    id: str
    patient_age: int
    patient_sex: str
    systolic_bp: float
    diastolic_bp: float
    cholesterol: float
    hdl: float
    ldl: float
    blood_sugar: float
    bmi: float
    smoking: bool
    family_history: bool
    exercise: str
    has_ecg: bool
    ensemble_score: int
    ensemble_risk_level: str
    top_risk_factors: List[str]
    model_results: List[ModelSummary]
    ecg_analysis: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None


class HistoryResponse(BaseModel):
    """Recent predictions, newest first."""
    count: int
    records: List[HistoryRecordResponse]


class HealthResponse(BaseModel):
    """Health status response."""
    status: str
    version: str
    uptime_seconds: float
    models: List[str]
    timestamp: str
