"""
CardioPredict - FastAPI Application

Main application entry point with API endpoints for:
- Cardiovascular risk prediction (four models + ensemble)
- Prediction history
- PDF report download
"""
from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.responses import FileResponse
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
from datetime import date, datetime
import os
import time
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from cardiopredict.config import settings
from cardiopredict.core.inference import RiskLevel
from cardiopredict.exceptions import PredictionNotFoundError, StorageError, ReportGenerationError
from cardiopredict.models.prediction import (
    PredictionRequest, PredictionResponse, HistoryResponse, HistoryRecordResponse, HealthResponse
)
from cardiopredict.services.history import HistoryFilter
from cardiopredict.services.prediction import PredictionService
from cardiopredict.utils import get_logger, setup_logging

setup_logging(settings.log_level)
logger = get_logger(__name__)

_started_at = time.time()

# ---- FastAPI Application ----

app = FastAPI(
    title=f"{settings.app_name} API",
    description="Cardiovascular disease risk prediction with an ensemble of scoring models",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- Service ----
_service: Optional[PredictionService] = None


def get_service() -> PredictionService:
    """Shared PredictionService, created on first use."""
    global _service
    if _service is None:
        _service = PredictionService()
    return _service


# ---- API Endpoints ----

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(service: PredictionService = Depends(get_service)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=round(time.time() - _started_at, 2),
        models=service.orchestrator.model_names,
        timestamp=datetime.now().isoformat(),
    )


@app.post(f"{settings.api_prefix}/predict", response_model=PredictionResponse, tags=["Prediction"])
async def predict(request: PredictionRequest, service: PredictionService = Depends(get_service)):
    """
    Run the four scoring models on the patient inputs.

    Returns per-model scores, the ensemble score, top risk factors and the
    ECG interpretation when an ECG was attached.
    """
    response = await service.process_prediction(request.to_patient())
    return PredictionResponse(**response)


@app.get(f"{settings.api_prefix}/predictions", response_model=HistoryResponse, tags=["History"])
async def list_predictions(
    limit: int = Query(default=settings.history_limit, ge=1, le=500),
    risk_level: Optional[RiskLevel] = Query(default=None),
    min_age: Optional[int] = Query(default=None, ge=0),
    max_age: Optional[int] = Query(default=None, ge=0),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None),
    service: PredictionService = Depends(get_service)
):
    """
    Most recent predictions, newest first.

    Filters apply to the newest ``limit`` records.
    """
    filters = HistoryFilter(
        risk_level=risk_level.value if risk_level else None,
        min_age=min_age,
        max_age=max_age,
        date_from=date_from,
        date_to=date_to,
    )
    try:
        records = service.get_history(limit, filters)
    except StorageError as e:
        logger.error(f"History lookup failed: {e}")
        raise HTTPException(status_code=503, detail="Prediction history unavailable")

    return HistoryResponse(
        count=len(records),
        records=[HistoryRecordResponse(**r) for r in records]
    )


@app.get(f"{settings.api_prefix}/predictions/{{prediction_id}}", response_model=HistoryRecordResponse, tags=["History"])
async def get_prediction(prediction_id: str, service: PredictionService = Depends(get_service)):
    """Get one stored prediction."""
    try:
        return HistoryRecordResponse(**service.get_prediction(prediction_id))
    except PredictionNotFoundError:
        raise HTTPException(status_code=404, detail="Prediction not found")
    except StorageError as e:
        logger.error(f"Prediction lookup failed: {e}")
        raise HTTPException(status_code=503, detail="Prediction history unavailable")


@app.get(f"{settings.api_prefix}/predictions/{{prediction_id}}/report", tags=["Reports"])
async def download_report(prediction_id: str, service: PredictionService = Depends(get_service)):
    """
    Download the PDF report of a stored prediction.
    """
    try:
        report = service.generate_report(prediction_id)
    except PredictionNotFoundError:
        raise HTTPException(status_code=404, detail="Prediction not found")
    except StorageError as e:
        logger.error(f"Prediction lookup failed: {e}")
        raise HTTPException(status_code=503, detail="Prediction history unavailable")
    except ReportGenerationError as e:
        raise HTTPException(status_code=500, detail=f"Report generation failed: {str(e)}")

    if not report.pdf_path or not os.path.exists(report.pdf_path):
        raise HTTPException(status_code=404, detail="PDF file not found")

    return FileResponse(
        path=report.pdf_path,
        media_type="application/pdf",
        filename=f"{report.report_id}.pdf"
    )


# ---- Application Lifecycle ----

@app.on_event("startup")
async def startup_event():
    """Initialize on startup."""
    logger.info(f"{settings.app_name} API starting up...")
    os.makedirs(settings.reports_dir, exist_ok=True)
    logger.info("API ready to accept requests")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info(f"{settings.app_name} API shutting down...")


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
