"""
Prediction Service - Risk Prediction, History and Reports
"""
from datetime import datetime
from typing import Dict, Any, List, Optional

from cardiopredict.config import settings
from cardiopredict.core.ecg import ECGAnalysis
from cardiopredict.core.inference import PredictionOrchestrator, ModelScore, PredictionResult, MODEL_SPECS
from cardiopredict.core.patient import PatientAttributes
from cardiopredict.core.random_source import NumpyRandomSource
from cardiopredict.core.reports import PredictionReportGenerator, PredictionReport
from cardiopredict.exceptions import StorageError
from cardiopredict.services.history import PredictionStore, HistoryFilter
from cardiopredict.utils import get_logger

logger = get_logger(__name__)

MODEL_TYPES = {spec.name: spec.model_type for spec in MODEL_SPECS}


def patient_from_record(record: Dict[str, Any]) -> PatientAttributes:
    """Rebuild the patient inputs of a stored prediction."""
    return PatientAttributes(
        age=record["patient_age"],
        sex=record["patient_sex"],
        systolic_bp=record["systolic_bp"],
        diastolic_bp=record["diastolic_bp"],
        cholesterol=record["cholesterol"],
        hdl=record["hdl"],
        ldl=record["ldl"],
        blood_sugar=record["blood_sugar"],
        bmi=record["bmi"],
        smoking=record["smoking"],
        family_history=record["family_history"],
        exercise=record["exercise"],
        has_ecg=record["has_ecg"],
    )


def result_from_record(record: Dict[str, Any]) -> PredictionResult:
    """Rebuild a PredictionResult from a stored prediction."""
    predictions = [
        ModelScore(
            model_name=m["model_name"],
            model_type=MODEL_TYPES.get(m["model_name"], ""),
            risk_score=int(m["risk_score"]),
            confidence=int(m["confidence"]),
        )
        for m in record.get("model_results", [])
    ]
    ecg = record.get("ecg_analysis")
    return PredictionResult(
        predictions=predictions,
        ensemble_score=int(record["ensemble_score"]),
        top_risk_factors=list(record.get("top_risk_factors", [])),
        ecg_analysis=ECGAnalysis.from_dict(ecg) if ecg else None,
    )


class PredictionService:
    """
    Service class to handle the prediction business logic.
    Decouples the risk engine from FastAPI endpoints and storage.
    """

    def __init__(
        self,
        orchestrator: Optional[PredictionOrchestrator] = None,
        store: Optional[PredictionStore] = None,
        report_generator: Optional[PredictionReportGenerator] = None,
        persist: Optional[bool] = None
    ):
        self.orchestrator = orchestrator or PredictionOrchestrator(NumpyRandomSource(settings.random_seed))
        self._persist = settings.persist_predictions if persist is None else persist
        self.store = store
        if self.store is None and self._persist:
            self.store = PredictionStore(settings.database_url)
        self._report_generator = report_generator

    @property
    def report_generator(self) -> PredictionReportGenerator:
        if self._report_generator is None:
            self._report_generator = PredictionReportGenerator(output_dir=settings.reports_dir)
        return self._report_generator

    async def process_prediction(
        self,
        patient: PatientAttributes,
        ecg_requested: Optional[bool] = None
    ) -> Dict[str, Any]:
        """
        Runs a prediction and stores it.

        The result is computed before any storage is attempted; a failed
        write is logged and reported with ``saved=False``.

        Args:
            patient: Patient inputs.
            ecg_requested: Simulate an ECG interpretation (defaults to patient.has_ecg).

        Returns:
            A dictionary matching PredictionResponse.
        """
        timestamp = datetime.now()
        result = self.orchestrator.predict(patient, ecg_requested)

        logger.info(
            f"Prediction: ensemble={result.ensemble_score} ({result.ensemble_risk_level.value}), "
            f"ecg={'yes' if result.ecg_analysis else 'no'}"
        )

        response = result.to_dict()
        response.update({
            "prediction_id": None,
            "timestamp": timestamp.isoformat(),
            "saved": False,
            "message": None,
        })

        if self.store is not None:
            try:
                response["prediction_id"] = self.store.save(patient, result)
                response["saved"] = True
                response["message"] = "Results stored in database."
            except StorageError as e:
                logger.error(f"Failed to save prediction: {e}", exc_info=True)
                response["message"] = "Could not store results."

        return response

    def get_history(self, limit: Optional[int] = None, filters: Optional[HistoryFilter] = None) -> List[Dict[str, Any]]:
        """Most recent stored predictions, newest first."""
        if self.store is None:
            return []
        return self.store.recent(limit or settings.history_limit, filters)

    def get_prediction(self, prediction_id: str) -> Dict[str, Any]:
        if self.store is None:
            raise StorageError("Prediction history is disabled")
        return self.store.get(prediction_id)

    def generate_report(self, prediction_id: str) -> PredictionReport:
        """Render the PDF report of a stored prediction."""
        record = self.get_prediction(prediction_id)
        return self.report_generator.generate(
            patient_from_record(record),
            result_from_record(record),
            report_id=f"CardioPredict_Report_{prediction_id}",
        )
