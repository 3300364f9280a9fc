"""
Unit Tests for PDF Report Generation
"""
import os

import pytest

from cardiopredict.core.ecg import ECGSimulator, Rhythm
from cardiopredict.core.inference import PredictionOrchestrator, RiskLevel
from cardiopredict.core.random_source import SequenceRandomSource
from cardiopredict.core.reports import PredictionReportGenerator
from cardiopredict.core.reports.prediction_report import patient_fields, ecg_fields, _grid


@pytest.fixture
def generator(tmp_path):
    return PredictionReportGenerator(output_dir=str(tmp_path / "reports"))


class TestFields:
    """Tests for the display rows."""

    def test_patient_fields(self, example_patient):
        rows = dict(patient_fields(example_patient))
        assert rows["Sex"] == "Male"
        assert rows["Systolic BP"] == "138 mmHg"
        assert rows["BMI"] == "28.5"
        assert rows["Family History"] == "Yes"
        assert rows["Exercise"] == "Light"

    def test_ecg_fields_af(self):
        ecg = ECGSimulator(SequenceRandomSource([0.5])).simulate(rhythm=Rhythm.ATRIAL_FIBRILLATION)
        rows = dict(ecg_fields(ecg))
        assert rows["PR Interval"] == "N/A"
        assert rows["Risk Impact"] == "+30 pts"

    def test_ecg_fields_with_pr(self):
        ecg = ECGSimulator(SequenceRandomSource([0.1])).simulate()
        assert dict(ecg_fields(ecg))["PR Interval"] == "128 ms"

    def test_grid_pads_last_row(self):
        grid = _grid([("a", "1"), ("b", "2"), ("c", "3")], columns=2)
        assert grid == [["a", "b"], ["1", "2"], ["c", ""], ["3", ""]]


class TestPredictionReportGenerator:
    """Tests for PDF generation."""

    def test_generate_without_ecg(self, generator, example_patient):
        result = PredictionOrchestrator(SequenceRandomSource([0.5])).predict(example_patient, False)
        report = generator.generate(example_patient, result, report_id="test_report")

        assert report.report_id == "test_report"
        assert report.ensemble_score == 53
        assert report.ensemble_risk_level == RiskLevel.HIGH
        assert os.path.exists(report.pdf_path)
        with open(report.pdf_path, "rb") as f:
            assert f.read(4) == b"%PDF"

    def test_generate_with_ecg(self, generator, example_patient):
        source = SequenceRandomSource([0.8] + [0.5] * 17, cycle=False)
        result = PredictionOrchestrator(source).predict(example_patient, True)
        report = generator.generate(example_patient, result)

        assert report.report_id.startswith("CVD-")
        assert os.path.getsize(report.pdf_path) > 0

    def test_generate_bytes(self, generator, example_patient):
        result = PredictionOrchestrator(SequenceRandomSource([0.5])).predict(example_patient, False)
        pdf_bytes = generator.generate_bytes(example_patient, result)
        assert pdf_bytes.startswith(b"%PDF")

    def test_report_to_dict(self, generator, example_patient):
        result = PredictionOrchestrator(SequenceRandomSource([0.5])).predict(example_patient, False)
        data = generator.generate(example_patient, result, report_id="dict_report").to_dict()
        assert data["ensemble_risk_level"] == "high"
        assert data["pdf_path"].endswith("dict_report.pdf")
