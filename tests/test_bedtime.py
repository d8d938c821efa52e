"""Tests for bedtime estimation."""

from __future__ import annotations

import time as time_module
from datetime import date, datetime, time, timedelta, timezone
from types import SimpleNamespace

import pytest

from betterrest.config import ModelConfig
from betterrest.estimator import (
    BedtimeEstimator,
    anchor_wake_time,
    build_features,
    compute_bedtime,
    estimate,
    subtract_duration,
    wake_seconds,
)
from betterrest.models import (
    FAILURE_MESSAGE,
    BedtimeFailure,
    BedtimeSuccess,
    EstimationFailure,
    ModelLoadError,
    PredictionError,
    SleepFeatures,
    SleepPrediction,
)
from betterrest.regression import load_model, model_loader

from conftest import ConstantModel

WAKE = datetime(2024, 4, 27, 7, 0)


class TestWakeSeconds:
    """Tests for wake_seconds conversion."""

    def test_seven_am(self) -> None:
        assert wake_seconds(time(7, 0)) == 25200

    def test_midnight(self) -> None:
        assert wake_seconds(time(0, 0)) == 0

    def test_minutes_counted(self) -> None:
        assert wake_seconds(time(6, 45)) == 6 * 3600 + 45 * 60

    def test_seconds_and_date_ignored(self) -> None:
        """Only hour and minute contribute."""
        assert wake_seconds(datetime(1999, 1, 1, 7, 0, 59)) == 25200

    def test_missing_components_default_to_zero(self) -> None:
        assert wake_seconds(SimpleNamespace(hour=7)) == 25200
        assert wake_seconds(SimpleNamespace(minute=30)) == 1800
        assert wake_seconds(object()) == 0

    def test_unparseable_components_default_to_zero(self) -> None:
        assert wake_seconds(SimpleNamespace(hour="seven", minute="15")) == 900
        assert wake_seconds(SimpleNamespace(hour=None, minute=None)) == 0
        assert wake_seconds(SimpleNamespace(hour=float("inf"), minute=0)) == 0
        assert wake_seconds(SimpleNamespace(hour=7, minute=float("nan"))) == 25200


class TestBuildFeatures:
    """Tests for input normalization."""

    def test_features_are_floats(self) -> None:
        features = build_features(time(7, 0), 8.0, 2)
        assert features == SleepFeatures(wake=25200.0, estimated_sleep=8.0, coffee=2.0)
        assert isinstance(features.coffee, float)

    def test_as_dict_uses_artifact_names(self) -> None:
        features = build_features(time(7, 0), 8.5, 3)
        assert features.as_dict() == {
            "wake": 25200.0,
            "estimatedSleep": 8.5,
            "coffee": 3.0,
        }


class TestAnchorWakeTime:
    """Tests for placing a wake time on a date."""

    def test_datetime_unchanged(self) -> None:
        assert anchor_wake_time(WAKE) is WAKE

    def test_time_on_reference(self) -> None:
        result = anchor_wake_time(time(7, 0), reference=date(2024, 1, 2))
        assert result == datetime(2024, 1, 2, 7, 0)

    def test_duck_typed_time(self) -> None:
        result = anchor_wake_time(SimpleNamespace(hour=6, minute=30), reference=date(2024, 1, 2))
        assert result == datetime(2024, 1, 2, 6, 30)


class TestEstimate:
    """Tests for the estimate operation."""

    def test_success_subtracts_prediction(self, constant_model) -> None:
        result = estimate(WAKE, 8.0, 1, constant_model)

        assert isinstance(result, BedtimeSuccess)
        assert result.success
        assert result.bedtime == datetime(2024, 4, 26, 23, 0)

    def test_model_receives_normalized_features(self, constant_model) -> None:
        estimate(datetime(2024, 4, 27, 6, 30), 7.5, 4, constant_model)

        assert constant_model.calls == [
            SleepFeatures(wake=23400.0, estimated_sleep=7.5, coffee=4.0)
        ]

    def test_fractional_prediction(self) -> None:
        result = estimate(WAKE, 8.0, 1, ConstantModel(29845.5))
        assert result.bedtime == WAKE - timedelta(seconds=29845.5)

    def test_midnight_wraparound(self) -> None:
        """Wake 00:30 with 2 hours predicted lands on 22:30 the day before."""
        wake = datetime(2024, 4, 27, 0, 30)
        result = estimate(wake, 8.0, 1, ConstantModel(2 * 3600))

        assert isinstance(result, BedtimeSuccess)
        assert result.bedtime == datetime(2024, 4, 26, 22, 30)
        assert (result.bedtime.hour, result.bedtime.minute) == (22, 30)

    def test_bare_time_wraps_to_previous_day(self) -> None:
        result = estimate(time(0, 30), 8.0, 1, ConstantModel(2 * 3600), reference=date(2024, 3, 1))
        assert result.bedtime == datetime(2024, 2, 29, 22, 30)

    def test_deterministic(self, goal_model) -> None:
        first = estimate(WAKE, 9.25, 3, goal_model)
        second = estimate(WAKE, 9.25, 3, goal_model)
        assert first == second

    @pytest.mark.parametrize("sleep_goal", [4.0, 12.0])
    @pytest.mark.parametrize("coffee", [1, 20])
    def test_boundary_inputs_succeed(self, goal_model, sleep_goal, coffee) -> None:
        result = estimate(WAKE, sleep_goal, coffee, goal_model)

        assert isinstance(result, BedtimeSuccess)
        assert result.bedtime == WAKE - timedelta(hours=sleep_goal)

    @pytest.mark.parametrize(
        "wake,sleep_goal,coffee",
        [
            (WAKE, 8.0, 1),
            (datetime(2024, 4, 27, 0, 0), 4.0, 20),
            (time(23, 59), 12.0, 5),
        ],
    )
    def test_failing_model_gives_fixed_message(
        self, failing_model, wake, sleep_goal, coffee
    ) -> None:
        result = estimate(wake, sleep_goal, coffee, failing_model)

        assert isinstance(result, BedtimeFailure)
        assert not result.success
        assert result.reason == FAILURE_MESSAGE
        assert result.reason == "Sorry, there was a problem calculating your bedtime."

    def test_exactly_one_variant(self, goal_model, failing_model) -> None:
        for model in (goal_model, failing_model):
            result = estimate(WAKE, 8.0, 1, model)
            assert isinstance(result, BedtimeSuccess) != isinstance(result, BedtimeFailure)

    def test_non_finite_prediction_fails(self) -> None:
        result = estimate(WAKE, 8.0, 1, ConstantModel(float("nan")))
        assert result == BedtimeFailure(FAILURE_MESSAGE)

    def test_overflowing_prediction_fails(self) -> None:
        result = estimate(WAKE, 8.0, 1, ConstantModel(1e18))
        assert isinstance(result, BedtimeFailure)

    def test_malformed_prediction_fails(self) -> None:
        class BadOutput:
            def predict(self, features):
                return {"actualSleep": 100}

        assert isinstance(estimate(WAKE, 8.0, 1, BadOutput()), BedtimeFailure)

    def test_loader_called_at_estimate_time(self) -> None:
        calls = []

        def loader():
            calls.append(1)
            return ConstantModel(3600)

        result = estimate(WAKE, 8.0, 1, loader)

        assert calls == [1]
        assert result.bedtime == datetime(2024, 4, 27, 6, 0)

    def test_loader_failure_gives_fixed_message(self, tmp_path) -> None:
        loader = model_loader(ModelConfig(path=tmp_path / "missing.yaml"))
        result = estimate(WAKE, 8.0, 1, loader)
        assert result == BedtimeFailure(FAILURE_MESSAGE)

    def test_not_a_model(self) -> None:
        assert isinstance(estimate(WAKE, 8.0, 1, 42), BedtimeFailure)

    def test_on_error_receives_chained_failure(self, failing_model) -> None:
        failures = []
        result = estimate(WAKE, 8.0, 1, failing_model, on_error=failures.append)

        assert result == BedtimeFailure(FAILURE_MESSAGE)
        assert len(failures) == 1
        assert isinstance(failures[0], EstimationFailure)
        assert isinstance(failures[0].__cause__, RuntimeError)
        assert str(failures[0].__cause__) == "inference exploded"

    def test_on_error_not_called_on_success(self, constant_model) -> None:
        failures = []
        result = estimate(WAKE, 8.0, 1, constant_model, on_error=failures.append)

        assert isinstance(result, BedtimeSuccess)
        assert failures == []


class TestComputeBedtime:
    """Tests for the raising form."""

    def test_returns_datetime(self, constant_model) -> None:
        assert compute_bedtime(WAKE, 8.0, 1, constant_model) == datetime(2024, 4, 26, 23, 0)

    def test_cause_is_chained(self, failing_model) -> None:
        with pytest.raises(EstimationFailure) as excinfo:
            compute_bedtime(WAKE, 8.0, 1, failing_model)

        assert str(excinfo.value) == FAILURE_MESSAGE
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_non_finite_prediction_cause(self) -> None:
        with pytest.raises(PredictionError):
            compute_bedtime(WAKE, 8.0, 1, ConstantModel(float("inf")))

    def test_estimation_failures_pass_through(self, tmp_path) -> None:
        loader = model_loader(ModelConfig(path=tmp_path / "missing.yaml"))
        with pytest.raises(ModelLoadError):
            compute_bedtime(WAKE, 8.0, 1, loader)


class TestBedtimeEstimator:
    """Tests for the bound estimator."""

    def test_bundled_model(self) -> None:
        estimator = BedtimeEstimator(load_model())
        result = estimator.estimate(WAKE, 8.0, 1)

        # 1200 - 0.0125 * 25200 + 3540 * 8 + 640 * 1 = 29845 seconds
        assert isinstance(result, BedtimeSuccess)
        expected = datetime(2024, 4, 26, 22, 42, 35)
        assert abs(result.bedtime - expected) < timedelta(seconds=1)

    def test_more_coffee_means_earlier_bedtime(self) -> None:
        estimator = BedtimeEstimator(model_loader())
        one_cup = estimator.estimate(WAKE, 8.0, 1)
        five_cups = estimator.estimate(WAKE, 8.0, 5)
        assert five_cups.bedtime < one_cup.bedtime

    def test_recovers_after_failure(self, tmp_path, linear_artifact) -> None:
        """A failed estimate does not prevent the next one."""
        path = tmp_path / "later.yaml"
        estimator = BedtimeEstimator(model_loader(ModelConfig(path=path)))

        assert isinstance(estimator.estimate(WAKE, 8.0, 1), BedtimeFailure)

        path.write_text(linear_artifact.read_text())
        result = estimator.estimate(WAKE, 8.0, 1)
        assert result == BedtimeSuccess(WAKE - timedelta(seconds=8 * 3600 + 600))

    def test_on_error_passed_through(self, failing_model) -> None:
        failures = []
        estimator = BedtimeEstimator(failing_model, on_error=failures.append)

        assert isinstance(estimator.estimate(WAKE, 8.0, 1), BedtimeFailure)
        assert [type(f.__cause__) for f in failures] == [RuntimeError]


class TestSleepPrediction:
    def test_duration(self) -> None:
        assert SleepPrediction(5400.0).duration == timedelta(minutes=90)

    def test_is_finite(self) -> None:
        assert SleepPrediction(5400.0).is_finite()
        assert not SleepPrediction(float("inf")).is_finite()
        assert not SleepPrediction(float("nan")).is_finite()


@pytest.fixture
def new_york_local_time(monkeypatch):
    """Run the test with America/New_York as the process time zone."""
    if not hasattr(time_module, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time_module.tzset()
    if datetime(2024, 1, 15, 12, 0).astimezone().utcoffset() != timedelta(hours=-5):
        monkeypatch.undo()
        time_module.tzset()
        pytest.skip("America/New_York zone data is not installed")
    yield
    monkeypatch.undo()
    time_module.tzset()


class TestDaylightSaving:
    """Bedtimes are a fixed amount of real time before waking."""

    def test_spring_forward(self, new_york_local_time, constant_model) -> None:
        """Clocks skip 02:00-03:00 on 2024-03-10, so 8 hours back is 22:00."""
        wake = datetime(2024, 3, 10, 7, 0)
        result = estimate(wake, 8.0, 1, constant_model)

        assert result == BedtimeSuccess(datetime(2024, 3, 9, 22, 0))
        assert wake.astimezone() - result.bedtime.astimezone() == timedelta(hours=8)

    def test_fall_back(self, new_york_local_time, constant_model) -> None:
        """Clocks repeat 01:00-02:00 on 2024-11-03, so 8 hours back is midnight."""
        wake = datetime(2024, 11, 3, 7, 0)
        bedtime = compute_bedtime(wake, 8.0, 1, constant_model)

        assert bedtime == datetime(2024, 11, 3, 0, 0)
        assert wake.astimezone() - bedtime.astimezone() == timedelta(hours=8)

    def test_bare_time_on_transition_day(self, new_york_local_time, constant_model) -> None:
        bedtime = compute_bedtime(
            time(7, 0), 8.0, 1, constant_model, reference=date(2024, 3, 10)
        )
        assert bedtime == datetime(2024, 3, 9, 22, 0)

    def test_ordinary_day_unchanged(self, new_york_local_time, constant_model) -> None:
        assert compute_bedtime(WAKE, 8.0, 1, constant_model) == datetime(2024, 4, 26, 23, 0)

    def test_aware_wake_time_keeps_zone(self, constant_model) -> None:
        zoneinfo = pytest.importorskip("zoneinfo")
        try:
            new_york = zoneinfo.ZoneInfo("America/New_York")
        except zoneinfo.ZoneInfoNotFoundError:
            pytest.skip("America/New_York zone data is not installed")

        wake = datetime(2024, 3, 10, 7, 0, tzinfo=new_york)
        bedtime = compute_bedtime(wake, 8.0, 1, constant_model)

        assert bedtime.tzinfo is new_york
        assert bedtime.replace(tzinfo=None) == datetime(2024, 3, 9, 22, 0)
        assert wake - bedtime == timedelta(hours=8)


class TestSubtractDuration:
    def test_utc(self) -> None:
        moment = datetime(2024, 3, 10, 7, 0, tzinfo=timezone.utc)
        assert subtract_duration(moment, timedelta(hours=8)) == datetime(
            2024, 3, 9, 23, 0, tzinfo=timezone.utc
        )

    def test_naive_stays_naive(self) -> None:
        result = subtract_duration(WAKE, timedelta(minutes=30))
        assert result.tzinfo is None
        assert result == datetime(2024, 4, 27, 6, 30)

    def test_naive_local_across_transition(self, new_york_local_time) -> None:
        result = subtract_duration(datetime(2024, 3, 10, 3, 30), timedelta(hours=1))
        assert result == datetime(2024, 3, 10, 1, 30)
