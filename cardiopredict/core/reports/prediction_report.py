"""
Prediction Report Generator

Generates downloadable PDF reports for a single risk prediction:
patient inputs, ensemble score, top risk factors, per-model breakdown and
the ECG interpretation when one was simulated.
"""
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Tuple
from datetime import datetime
import os
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.colors import HexColor, black, white, lightgrey
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, KeepTogether
from reportlab.lib.enums import TA_LEFT

from cardiopredict.core.ecg import ECGAnalysis, NO_ABNORMALITIES
from cardiopredict.core.inference.risk_engine import RiskLevel, PredictionResult
from cardiopredict.core.patient import PatientAttributes
from cardiopredict.exceptions import ReportGenerationError
from cardiopredict.utils import get_logger

logger = get_logger(__name__)


# Risk level colors (Pastel backgrounds)
RISK_BG_COLORS = {
    RiskLevel.LOW: HexColor("#D1FAE5"),       # Mint Green
    RiskLevel.MODERATE: HexColor("#FEF3C7"),  # Pale Amber
    RiskLevel.HIGH: HexColor("#FEE2E2"),      # Pale Rose
    RiskLevel.CRITICAL: HexColor("#FECDD3"),  # Rose
}

RISK_TEXT_COLORS = {
    RiskLevel.LOW: HexColor("#065F46"),
    RiskLevel.MODERATE: HexColor("#92400E"),
    RiskLevel.HIGH: HexColor("#B91C1C"),
    RiskLevel.CRITICAL: HexColor("#881337"),
}

DISCLAIMER = (
    "DISCLAIMER: This report is generated by a prototype prediction system and is for "
    "educational/research purposes only. It should not be used for clinical decision-making. "
    "Always consult a qualified healthcare professional."
)


@dataclass
class PredictionReport:
    """Data container for a generated report."""
    report_id: str
    generated_at: datetime
    ensemble_score: int
    ensemble_risk_level: RiskLevel
    pdf_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "generated_at": self.generated_at.isoformat(),
            "ensemble_score": self.ensemble_score,
            "ensemble_risk_level": self.ensemble_risk_level.value,
            "pdf_path": self.pdf_path,
        }


def patient_fields(patient: PatientAttributes) -> List[Tuple[str, str]]:
    """Display rows for the patient information section."""
    return [
        ("Age", f"{patient.age}"),
        ("Sex", patient.sex.value.capitalize()),
        ("Systolic BP", f"{patient.systolic_bp:g} mmHg"),
        ("Diastolic BP", f"{patient.diastolic_bp:g} mmHg"),
        ("Total Cholesterol", f"{patient.cholesterol:g} mg/dL"),
        ("HDL", f"{patient.hdl:g} mg/dL"),
        ("LDL", f"{patient.ldl:g} mg/dL"),
        ("Blood Sugar", f"{patient.blood_sugar:g} mg/dL"),
        ("BMI", f"{patient.bmi:g}"),
        ("Smoking", "Yes" if patient.smoking else "No"),
        ("Family History", "Yes" if patient.family_history else "No"),
        ("Exercise", patient.exercise.value.capitalize()),
    ]


def ecg_fields(ecg: ECGAnalysis) -> List[Tuple[str, str]]:
    """Display rows for the ECG section. A PR interval of 0 shows as N/A."""
    return [
        ("Heart Rate", f"{ecg.heart_rate} bpm"),
        ("Rhythm", ecg.rhythm.value),
        ("PR Interval", "N/A" if ecg.pr_interval == 0 else f"{ecg.pr_interval} ms"),
        ("QRS Duration", f"{ecg.qrs_duration} ms"),
        ("QT Interval", f"{ecg.qt_interval} ms"),
        ("ST Segment", ecg.st_segment.value),
        ("T-Wave", ecg.t_wave.value),
        ("Risk Impact", f"+{ecg.risk_contribution} pts"),
    ]


def _grid(rows: List[Tuple[str, str]], columns: int = 4) -> List[List[str]]:
    """Lay out (label, value) pairs as alternating label/value rows."""
    grid = []
    for start in range(0, len(rows), columns):
        chunk = rows[start:start + columns]
        chunk = chunk + [("", "")] * (columns - len(chunk))
        grid.append([label for label, _ in chunk])
        grid.append([value for _, value in chunk])
    return grid


class PredictionReportGenerator:
    """
    Generates PDF reports for risk predictions.

    Reports are written to ``output_dir`` as ``<report_id>.pdf``.
    """

    def __init__(self, output_dir: str = "reports"):
        """Initialize generator with output directory."""
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)
        self._styles = getSampleStyleSheet()
        self._create_custom_styles()
        logger.info(f"PredictionReportGenerator initialized, output: {output_dir}")

    def _create_custom_styles(self):
        """Create custom paragraph styles with minimalist design."""
        if 'ReportTitle' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='ReportTitle',
                parent=self._styles['Title'],
                fontSize=20,
                spaceAfter=4,
                textColor=HexColor("#0D9488"),  # Teal
                alignment=TA_LEFT,
                fontName='Helvetica-Bold'
            ))

        if 'ReportSection' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='ReportSection',
                parent=self._styles['Heading2'],
                fontSize=12,
                spaceBefore=15,
                spaceAfter=8,
                textColor=HexColor("#374151"),
                fontName='Helvetica-Bold'
            ))

        if 'ReportBody' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='ReportBody',
                parent=self._styles['Normal'],
                fontSize=9,
                leading=14,
                textColor=HexColor("#374151"),
                fontName='Helvetica'
            ))

        if 'SmallText' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='SmallText',
                parent=self._styles['Normal'],
                fontSize=7,
                leading=10,
                textColor=HexColor("#6B7280")
            ))

    def generate(
        self,
        patient: PatientAttributes,
        result: PredictionResult,
        report_id: Optional[str] = None
    ) -> PredictionReport:
        """
        Generate a PDF report for one prediction.

        Args:
            patient: Inputs the prediction was computed from
            result: Prediction to report
            report_id: File stem; generated from the timestamp when omitted

        Returns:
            PredictionReport with the PDF path
        """
        generated_at = datetime.now()
        report = PredictionReport(
            report_id=report_id or f"CVD-{generated_at.strftime('%Y%m%d-%H%M%S')}",
            generated_at=generated_at,
            ensemble_score=result.ensemble_score,
            ensemble_risk_level=result.ensemble_risk_level,
        )
        try:
            report.pdf_path = self._generate_pdf(report, patient, result)
        except (OSError, ValueError) as e:
            logger.error(f"Report generation failed for {report.report_id}: {e}", exc_info=True)
            raise ReportGenerationError(f"Could not generate report {report.report_id}: {e}") from e
        return report

    def generate_bytes(self, patient: PatientAttributes, result: PredictionResult) -> bytes:
        """Generate PDF and return as bytes for download."""
        report = self.generate(patient, result)
        with open(report.pdf_path, 'rb') as f:
            return f.read()

    def _generate_pdf(self, report: PredictionReport, patient: PatientAttributes, result: PredictionResult) -> str:
        """Generate the actual PDF file."""
        filepath = os.path.join(self.output_dir, f"{report.report_id}.pdf")

        doc = SimpleDocTemplate(
            filepath,
            pagesize=A4,
            rightMargin=0.6*inch,
            leftMargin=0.6*inch,
            topMargin=0.6*inch,
            bottomMargin=0.6*inch
        )

        story = []

        # Header
        story.append(Paragraph("CardioPredict", self._styles['ReportTitle']))
        story.append(Paragraph(
            f"Multi-Model CVD Risk Assessment Report &nbsp;|&nbsp; "
            f"Generated: {report.generated_at.strftime('%Y-%m-%d %H:%M')}",
            self._styles['SmallText']
        ))
        story.append(Spacer(1, 12))

        # Patient information
        story.append(Paragraph("Patient Information", self._styles['ReportSection']))
        story.append(self._key_value_table(patient_fields(patient)))

        # Ensemble
        level = result.ensemble_risk_level
        story.append(Paragraph("Ensemble Prediction", self._styles['ReportSection']))
        ensemble_table = Table(
            [[f"{result.ensemble_score}", f"/ 100  -  {level.value.upper()} RISK"]],
            colWidths=[0.9*inch, 5.9*inch]
        )
        ensemble_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), RISK_BG_COLORS.get(level, lightgrey)),
            ('TEXTCOLOR', (0, 0), (-1, -1), RISK_TEXT_COLORS.get(level, black)),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (0, 0), 20),
            ('FONTSIZE', (1, 0), (1, 0), 10),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 10),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 10),
        ]))
        story.append(ensemble_table)

        # Risk factors
        if result.top_risk_factors:
            story.append(Paragraph("Top Risk Factors", self._styles['ReportSection']))
            for factor in result.top_risk_factors:
                story.append(Paragraph(f"&bull; {escape(factor)}", self._styles['ReportBody']))

        # Model breakdown
        story.append(Paragraph("Model Breakdown", self._styles['ReportSection']))
        model_data = [["Model", "Type", "Risk Score", "Confidence", "Risk Level"]]
        for prediction in result.predictions:
            model_data.append([
                prediction.model_name,
                prediction.model_type,
                f"{prediction.risk_score}/100",
                f"{prediction.confidence}%",
                prediction.risk_level.value.upper(),
            ])
        model_table = Table(model_data, colWidths=[1.8*inch, 1.3*inch, 1.2*inch, 1.2*inch, 1.3*inch])
        model_style = [
            # Minimalist header
            ('TEXTCOLOR', (0, 0), (-1, 0), HexColor("#374151")),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('LINEBELOW', (0, 0), (-1, 0), 1, HexColor("#E5E7EB")),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('TOPPADDING', (0, 0), (-1, -1), 6),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ('LINEBELOW', (0, 1), (-1, -1), 0.5, HexColor("#F9FAFB")),
        ]
        for row, prediction in enumerate(result.predictions, start=1):
            model_style.append(('BACKGROUND', (4, row), (4, row), RISK_BG_COLORS[prediction.risk_level]))
            model_style.append(('TEXTCOLOR', (4, row), (4, row), RISK_TEXT_COLORS[prediction.risk_level]))
        model_table.setStyle(TableStyle(model_style))
        story.append(model_table)

        # ECG
        if result.ecg_analysis is not None:
            story.append(KeepTogether(self._ecg_section(result.ecg_analysis)))

        # Disclaimer
        story.append(Spacer(1, 20))
        story.append(Paragraph(DISCLAIMER, self._styles['SmallText']))

        doc.build(story)
        logger.info(f"Prediction report generated: {filepath}")
        return filepath

    def _ecg_section(self, ecg: ECGAnalysis) -> list:
        flowables = [
            Paragraph("ECG Analysis", self._styles['ReportSection']),
            self._key_value_table(ecg_fields(ecg)),
            Spacer(1, 6),
            Paragraph("<b>Findings:</b>", self._styles['ReportBody']),
        ]
        for finding in ecg.findings:
            color = "#10B981" if finding == NO_ABNORMALITIES else "#EF4444"
            flowables.append(Paragraph(
                f"<font color='{color}'>&bull;</font> {escape(finding)}", self._styles['ReportBody']
            ))
        return flowables

    def _key_value_table(self, rows: List[Tuple[str, str]]) -> Table:
        grid = _grid(rows)
        table = Table(grid, colWidths=[1.7*inch] * 4)
        style = [
            ('BACKGROUND', (0, 0), (-1, -1), HexColor("#F1F5F9")),
            ('GRID', (0, 0), (-1, -1), 2, white),
            ('TOPPADDING', (0, 0), (-1, -1), 3),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
        ]
        for row in range(0, len(grid), 2):
            style.append(('FONTSIZE', (0, row), (-1, row), 7))
            style.append(('TEXTCOLOR', (0, row), (-1, row), HexColor("#64748B")))
            style.append(('FONTNAME', (0, row + 1), (-1, row + 1), 'Helvetica-Bold'))
            style.append(('FONTSIZE', (0, row + 1), (-1, row + 1), 10))
        table.setStyle(TableStyle(style))
        return table
