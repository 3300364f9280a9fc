"""
Unit Tests for ECG Simulation

Tests for rhythm selection, interval ranges, finding rules and the
risk contribution cap.
"""
import pytest

from cardiopredict.core.ecg import (
    ECGAnalysis, ECGSimulator, Rhythm, STSegment, TWave, NO_ABNORMALITIES, interpret_findings
)
from cardiopredict.core.random_source import NumpyRandomSource, SequenceRandomSource


class TestInterpretFindings:
    """Tests for the finding rules."""

    def test_normal_ecg(self):
        findings, contribution = interpret_findings(
            Rhythm.NORMAL_SINUS, 72, 160, 90, 400, STSegment.NORMAL, TWave.NORMAL
        )
        assert findings == [NO_ABNORMALITIES]
        assert contribution == 0

    def test_rule_order(self):
        findings, contribution = interpret_findings(
            Rhythm.SINUS_BRADYCARDIA, 48, 210, 90, 400, STSegment.DEPRESSED, TWave.NORMAL
        )
        assert findings == [
            "Sinus Bradycardia detected",
            "Bradycardia",
            "Prolonged PR interval (possible 1st degree AV block)",
            "ST depression",
        ]
        assert contribution == 5 + 3 + 5 + 7

    def test_flutter_points(self):
        _, contribution = interpret_findings(
            Rhythm.ATRIAL_FLUTTER, 75, 160, 90, 400, STSegment.NORMAL, TWave.NORMAL
        )
        assert contribution == 12

    def test_contribution_capped(self):
        findings, contribution = interpret_findings(
            Rhythm.ATRIAL_FIBRILLATION, 140, 0, 130, 450, STSegment.ELEVATED, TWave.PEAKED
        )
        assert "Wide QRS complex" in findings
        assert "Prolonged QT interval" in findings
        assert contribution == 30


class TestECGSimulator:
    """Tests for ECGSimulator.simulate()."""

    def test_forced_atrial_fibrillation(self):
        """AF has no PR interval and skips the PR draw."""
        source = SequenceRandomSource([0.5])
        ecg = ECGSimulator(source).simulate(rhythm=Rhythm.ATRIAL_FIBRILLATION)

        assert ecg.rhythm == Rhythm.ATRIAL_FIBRILLATION
        assert ecg.pr_interval == 0
        assert "Atrial Fibrillation detected" in ecg.findings
        assert source.draws == 5  # heart rate, QRS, QT, ST, T

        # u=0.5: HR 115, ST Elevated, T Inverted -> 15 + 4 + 10 + 5, capped
        assert ecg.heart_rate == 115
        assert ecg.st_segment == STSegment.ELEVATED
        assert ecg.t_wave == TWave.INVERTED
        assert ecg.risk_contribution == 30

    def test_drawn_normal_sinus(self):
        """A low rhythm draw yields normal sinus with unremarkable intervals."""
        source = SequenceRandomSource([0.1])
        ecg = ECGSimulator(source).simulate()

        assert ecg.rhythm == Rhythm.NORMAL_SINUS
        assert ecg.heart_rate == 63
        assert ecg.pr_interval == 128
        assert ecg.qrs_duration == 85
        assert ecg.qt_interval == 360
        assert ecg.findings == (NO_ABNORMALITIES,)
        assert ecg.risk_contribution == 0
        assert not ecg.is_abnormal
        assert source.draws == 7

    def test_rhythm_selection_by_weight(self):
        cases = [(0.44, Rhythm.NORMAL_SINUS), (0.5, Rhythm.SINUS_TACHYCARDIA),
                 (0.7, Rhythm.SINUS_BRADYCARDIA), (0.8, Rhythm.ATRIAL_FIBRILLATION),
                 (0.95, Rhythm.ATRIAL_FLUTTER)]
        for draw, expected in cases:
            ecg = ECGSimulator(SequenceRandomSource([draw])).simulate()
            assert ecg.rhythm == expected

    def test_normal_sinus_morphology_skews_normal(self):
        """Normal sinus draws index floor(u * 1.5), so it never reaches the third option."""
        ecg = ECGSimulator(SequenceRandomSource([0.1, 0.5, 0.5, 0.5, 0.5, 0.99, 0.99])).simulate()
        assert ecg.rhythm == Rhythm.NORMAL_SINUS
        assert ecg.st_segment == STSegment.ELEVATED
        assert ecg.t_wave == TWave.INVERTED

    @pytest.mark.parametrize("seed", range(20))
    def test_ranges_hold_for_random_draws(self, seed):
        ecg = ECGSimulator(NumpyRandomSource(seed=seed)).simulate()

        hr_ranges = {
            Rhythm.SINUS_TACHYCARDIA: (100, 130),
            Rhythm.SINUS_BRADYCARDIA: (45, 60),
            Rhythm.ATRIAL_FIBRILLATION: (80, 150),
        }
        low, high = hr_ranges.get(ecg.rhythm, (60, 90))
        assert low <= ecg.heart_rate <= high
        if ecg.rhythm == Rhythm.ATRIAL_FIBRILLATION:
            assert ecg.pr_interval == 0
        else:
            assert 120 <= ecg.pr_interval <= 200
        assert 80 <= ecg.qrs_duration <= 130
        assert 350 <= ecg.qt_interval <= 450
        assert 0 <= ecg.risk_contribution <= 30
        assert ecg.findings


class TestECGAnalysis:

    def test_dict_restores_analysis(self):
        ecg = ECGSimulator(SequenceRandomSource([0.5])).simulate(rhythm=Rhythm.ATRIAL_FLUTTER)
        assert ECGAnalysis.from_dict(ecg.to_dict()) == ecg
