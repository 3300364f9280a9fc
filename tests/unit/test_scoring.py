"""
Unit Tests for Scoring Models

Tests for monotonicity, clamping, noise and confidence construction.
"""
from dataclasses import replace

import pytest

from cardiopredict.core.inference.scoring import (
    MODEL_SPECS, ScoringModel, ThresholdTerm, StepTerm, build_models
)
from cardiopredict.core.patient import PatientAttributes, ExerciseLevel, Sex
from cardiopredict.core.random_source import SequenceRandomSource


@pytest.fixture
def models():
    return build_models(SequenceRandomSource([0.5]))


class TestModelSpecs:
    """Tests for the declared model set."""

    def test_four_models_in_order(self):
        names = [spec.name for spec in MODEL_SPECS]
        assert names == ["Logistic Regression", "Random Forest", "Neural Network", "SVM"]

    def test_model_types(self):
        types = [spec.model_type for spec in MODEL_SPECS]
        assert types == ["Linear", "Ensemble", "Deep Learning", "Kernel"]

    def test_models_differ(self):
        """No two models share the same coefficient set."""
        term_sets = {spec.terms for spec in MODEL_SPECS}
        assert len(term_sets) == len(MODEL_SPECS)


class TestTerms:
    """Tests for term contributions."""

    def test_threshold_floored_at_zero(self, healthy_patient):
        term = ThresholdTerm("age", 30, 0.8)
        assert term.contribution(healthy_patient) == 0.0

    def test_threshold_linear_above_baseline(self, example_patient):
        term = ThresholdTerm("age", 30, 0.8)
        assert term.contribution(example_patient) == pytest.approx(17.6)

    def test_inverse_threshold(self, example_patient):
        term = ThresholdTerm("hdl", 50, 0.2, inverse=True)
        assert term.contribution(example_patient) == pytest.approx(1.6)
        assert term.contribution(replace(example_patient, hdl=70)) == 0.0

    def test_step_term(self, example_patient):
        term = StepTerm("blood_sugar", ((126, 8), (100, 4)))
        assert term.contribution(example_patient) == 4
        assert term.contribution(replace(example_patient, blood_sugar=140)) == 8
        assert term.contribution(replace(example_patient, blood_sugar=90)) == 0


class TestScoringModel:
    """Tests for ScoringModel.score()."""

    def test_midpoint_scores(self, example_patient, midpoint_scores):
        """With u=0.5 noise is zero and confidence is base + round(range / 2)."""
        for model in build_models(SequenceRandomSource([0.5])):
            result = model.score(example_patient)
            assert (result.risk_score, result.confidence) == midpoint_scores[model.name]

    def test_consumes_two_draws(self, example_patient):
        source = SequenceRandomSource([0.5])
        ScoringModel(MODEL_SPECS[0], source).score(example_patient)
        assert source.draws == 2

    def test_noise_bounds(self, example_patient):
        """Noise spans [-A, +A) around the deterministic score."""
        spec = MODEL_SPECS[1]  # amplitude 4
        raw = ScoringModel(spec, SequenceRandomSource([0.5])).raw_score(example_patient)
        low = ScoringModel(spec, SequenceRandomSource([0.0])).score(example_patient)
        assert low.risk_score == round(raw - 4)

    def test_confidence_range(self, example_patient):
        for spec in MODEL_SPECS:
            lowest = ScoringModel(spec, SequenceRandomSource([0.0])).score(example_patient)
            highest = ScoringModel(spec, SequenceRandomSource([0.999])).score(example_patient)
            assert lowest.confidence == spec.base_confidence
            assert highest.confidence == spec.base_confidence + spec.confidence_range

    def test_clamped_high(self, example_patient):
        extreme = replace(example_patient, age=200, systolic_bp=260, bmi=60, smoking=True)
        for model in build_models(SequenceRandomSource([0.999])):
            assert model.score(extreme).risk_score == 100

    def test_clamped_low(self, healthy_patient):
        """Negative raw scores saturate at zero."""
        odd = replace(healthy_patient, age=-50, bmi=-5)
        for model in build_models(SequenceRandomSource([0.0])):
            assert model.score(odd).risk_score == 0

    def test_risk_level_matches_score(self, example_patient, models):
        from cardiopredict.core.inference import classify
        for model in models:
            result = model.score(example_patient)
            assert result.risk_level == classify(result.risk_score)


class TestMonotonicity:
    """Raw scores move in the documented direction for each attribute."""

    INCREASING = [
        ("age", 70),
        ("systolic_bp", 170),
        ("diastolic_bp", 105),
        ("cholesterol", 300),
        ("ldl", 200),
        ("bmi", 35),
        ("blood_sugar", 150),
    ]

    @pytest.mark.parametrize("attribute,higher", INCREASING)
    def test_increasing_attributes(self, example_patient, models, attribute, higher):
        worse = replace(example_patient, **{attribute: higher})
        for model in models:
            assert model.raw_score(worse) >= model.raw_score(example_patient)

    @pytest.mark.parametrize("flag", ["smoking", "family_history"])
    def test_flags_increase(self, example_patient, models, flag):
        off = replace(example_patient, **{flag: False})
        on = replace(example_patient, **{flag: True})
        for model in models:
            assert model.raw_score(on) > model.raw_score(off)

    def test_male_increases(self, example_patient, models):
        female = replace(example_patient, sex=Sex.FEMALE)
        for model in models:
            assert model.raw_score(example_patient) > model.raw_score(female)

    def test_hdl_decreases(self, example_patient, models):
        better = replace(example_patient, hdl=80)
        for model in models:
            assert model.raw_score(better) <= model.raw_score(example_patient)

    def test_exercise_decreases(self, example_patient, models):
        levels = [ExerciseLevel.NONE, ExerciseLevel.LIGHT, ExerciseLevel.MODERATE, ExerciseLevel.HEAVY]
        for model in models:
            scores = [model.raw_score(replace(example_patient, exercise=level)) for level in levels]
            assert scores == sorted(scores, reverse=True)


class TestPatientAttributes:
    """Tests for input coercion."""

    def test_string_categories(self):
        patient = PatientAttributes(
            age=40, sex="Male", systolic_bp=120, diastolic_bp=80, cholesterol=200,
            hdl=50, ldl=120, blood_sugar=95, bmi=24, exercise="sedentary"
        )
        assert patient.sex == Sex.MALE
        assert patient.exercise == ExerciseLevel.NONE

    def test_from_dict_ignores_unknown(self, example_patient):
        data = example_patient.to_dict()
        data["notes"] = "ignored"
        assert PatientAttributes.from_dict(data) == example_patient
