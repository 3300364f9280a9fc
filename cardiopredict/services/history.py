"""
Prediction History Store

Persists every prediction as one flattened record and serves the most recent
records back, newest first, with optional filtering.
"""
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Dict, Any, List, Optional

from sqlalchemy import Column, Integer, Float, String, Boolean, DateTime, JSON
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from cardiopredict.core.inference.risk_engine import PredictionResult
from cardiopredict.core.patient import PatientAttributes
from cardiopredict.db import Base, make_engine, make_session_factory
from cardiopredict.exceptions import PredictionNotFoundError, StorageError
from cardiopredict.utils import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PredictionRecord(Base):
    __tablename__ = "predictions"
    id = Column(Integer, primary_key=True, autoincrement=True)
    prediction_id = Column(String(32), unique=True, index=True, nullable=False)

    # Patient inputs
    patient_age = Column(Integer, nullable=False)
    patient_sex = Column(String(8), nullable=False)
    systolic_bp = Column(Float, nullable=False)
    diastolic_bp = Column(Float, nullable=False)
    cholesterol = Column(Float, nullable=False)
    hdl = Column(Float, nullable=False)
    ldl = Column(Float, nullable=False)
    blood_sugar = Column(Float, nullable=False)
    bmi = Column(Float, nullable=False)
    smoking = Column(Boolean, default=False)
    family_history = Column(Boolean, default=False)
    exercise = Column(String(16), nullable=False)
    has_ecg = Column(Boolean, default=False)

    # Outputs
    ensemble_score = Column(Integer, nullable=False)
    ensemble_risk_level = Column(String(16), nullable=False, index=True)
    top_risk_factors = Column(JSON, nullable=False, default=list)
    model_results = Column(JSON, nullable=False, default=list)  # [{model_name, risk_score, confidence, risk_level}]
    ecg_analysis = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=_utcnow, index=True, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.prediction_id,
            "patient_age": self.patient_age,
            "patient_sex": self.patient_sex,
            "systolic_bp": self.systolic_bp,
            "diastolic_bp": self.diastolic_bp,
            "cholesterol": self.cholesterol,
            "hdl": self.hdl,
            "ldl": self.ldl,
            "blood_sugar": self.blood_sugar,
            "bmi": self.bmi,
            "smoking": bool(self.smoking),
            "family_history": bool(self.family_history),
            "exercise": self.exercise,
            "has_ecg": bool(self.has_ecg),
            "ensemble_score": self.ensemble_score,
            "ensemble_risk_level": self.ensemble_risk_level,
            "top_risk_factors": list(self.top_risk_factors or []),
            "model_results": list(self.model_results or []),
            "ecg_analysis": self.ecg_analysis,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def flatten_prediction(patient: PatientAttributes, result: PredictionResult) -> Dict[str, Any]:
    """Column values for one history record."""
    return {
        "patient_age": patient.age,
        "patient_sex": patient.sex.value,
        "systolic_bp": patient.systolic_bp,
        "diastolic_bp": patient.diastolic_bp,
        "cholesterol": patient.cholesterol,
        "hdl": patient.hdl,
        "ldl": patient.ldl,
        "blood_sugar": patient.blood_sugar,
        "bmi": patient.bmi,
        "smoking": patient.smoking,
        "family_history": patient.family_history,
        "exercise": patient.exercise.value,
        "has_ecg": result.ecg_analysis is not None,
        "ensemble_score": result.ensemble_score,
        "ensemble_risk_level": result.ensemble_risk_level.value,
        "top_risk_factors": list(result.top_risk_factors),
        "model_results": [p.summary() for p in result.predictions],
        "ecg_analysis": result.ecg_analysis.to_dict() if result.ecg_analysis else None,
    }


@dataclass
class HistoryFilter:
    """Filters applied to the recent-history listing. Date bounds are inclusive days."""
    risk_level: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return any(v is not None for v in (
            self.risk_level, self.min_age, self.max_age, self.date_from, self.date_to
        ))

    def matches(self, record: PredictionRecord) -> bool:
        if self.risk_level and record.ensemble_risk_level != self.risk_level:
            return False
        if self.min_age is not None and record.patient_age < self.min_age:
            return False
        if self.max_age is not None and record.patient_age > self.max_age:
            return False
        if self.date_from and record.created_at < datetime.combine(self.date_from, time.min):
            return False
        if self.date_to and record.created_at > datetime.combine(self.date_to, time.max):
            return False
        return True


class PredictionStore:
    """SQLAlchemy-backed store for past predictions."""

    def __init__(self, database_url: str = "sqlite://", session_factory: Optional[sessionmaker] = None):
        if session_factory is None:
            engine = make_engine(database_url)
            Base.metadata.create_all(bind=engine)
            session_factory = make_session_factory(engine)
        self._session_factory = session_factory
        logger.info(f"PredictionStore ready ({database_url.split('://')[0]})")

    def save(self, patient: PatientAttributes, result: PredictionResult) -> str:
        """Insert one prediction and return its id."""
        prediction_id = f"PRED-{uuid.uuid4().hex[:8].upper()}"
        record = PredictionRecord(prediction_id=prediction_id, **flatten_prediction(patient, result))
        with self._session_factory() as session:
            try:
                session.add(record)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError(f"Failed to save prediction: {e}") from e
        logger.info(f"Saved prediction {prediction_id} ({result.ensemble_risk_level.value})")
        return prediction_id

    def get(self, prediction_id: str) -> Dict[str, Any]:
        with self._session_factory() as session:
            try:
                record = (
                    session.query(PredictionRecord)
                    .filter(PredictionRecord.prediction_id == prediction_id)
                    .first()
                )
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to read prediction {prediction_id}: {e}") from e
            if record is None:
                raise PredictionNotFoundError(prediction_id)
            return record.to_dict()

    def recent(self, limit: int = 50, filters: Optional[HistoryFilter] = None) -> List[Dict[str, Any]]:
        """
        Most recent records, newest first.

        The filter applies to the newest ``limit`` records, so a filtered
        listing can be shorter than ``limit``.
        """
        with self._session_factory() as session:
            try:
                records = (
                    session.query(PredictionRecord)
                    .order_by(PredictionRecord.created_at.desc(), PredictionRecord.id.desc())
                    .limit(limit)
                    .all()
                )
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to fetch predictions: {e}") from e

        if filters is not None and filters.is_active:
            records = [r for r in records if filters.matches(r)]
        return [r.to_dict() for r in records]
