# tests/torchevents/detection/test__event_search.py
import math
import warnings

import pytest
import torch

from torchevents.detection import (
    Action,
    ContinueOnEvent,
    FunctionDetector,
    State,
    StopOnDecreasing,
    ThresholdDetector,
    and_,
    find_events,
    locate_event,
    not_,
    or_,
    sign_change,
)


def sine(t):
    return torch.tensor([math.sin(t)], dtype=torch.float64)


def _fast(detector):
    return detector.with_max_check_interval(0.05).with_threshold(1e-10)


class TestSignChange:
    """Tests for the bracket test."""

    @pytest.mark.parametrize(
        "g0, g1, expected",
        [
            (-1.0, 1.0, True),
            (1.0, -1.0, True),
            (-1.0, 0.0, False),
            (1.0, 0.0, False),
            (0.0, 1.0, False),
            (0.0, -1.0, False),
            (0.0, 0.0, False),
            (1.0, 2.0, False),
            (-1.0, -2.0, False),
            (math.nan, 1.0, False),
        ],
    )
    def test_sign_change(self, g0, g1, expected):
        assert sign_change(g0, g1) is expected


class TestLocateEvent:
    """Tests for bisection."""

    def test_converges(self):
        detector = ThresholdDetector(0, 0.5, threshold=1e-12)

        t_event, state = locate_event(detector, sine, 0.0, -0.5, 1.0)

        assert abs(t_event - math.pi / 6) <= 1e-12
        assert state.t == t_event
        assert detector.g(state) >= 0

    def test_warns_when_iterations_exhausted(self):
        detector = ThresholdDetector(
            0, 0.5, threshold=1e-12, max_iteration_count=3
        )

        with pytest.warns(RuntimeWarning, match="did not reach threshold"):
            t_event, _ = locate_event(detector, sine, 0.0, -0.5, 1.0)

        assert 0.0 < t_event <= 1.0

    def test_no_warning_on_convergence(self):
        detector = ThresholdDetector(0, 0.5, threshold=1e-6)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            locate_event(detector, sine, 0.0, -0.5, 1.0)


class TestFindEvents:
    """Tests for find_events."""

    def test_threshold_crossings(self):
        detector = _fast(ThresholdDetector(0, 0.5))

        result = find_events(detector, sine, (0.0, 2 * math.pi))

        expected = [math.pi / 6, 5 * math.pi / 6]
        assert len(result.events) == 2
        for event, t in zip(result.events, expected):
            assert abs(event.t - t) <= 1e-9
            assert event.action is Action.CONTINUE
        assert [e.increasing for e in result.events] == [True, False]
        assert not result.terminated
        assert result.t_final == 2 * math.pi

    def test_band_combination(self):
        """0.5 < sin(t) < 0.9 on [0, pi] enters and leaves twice."""
        band = _fast(and_(ThresholdDetector(0, 0.5), not_(ThresholdDetector(0, 0.9))))

        result = find_events(band, sine, (0.0, math.pi))

        expected = [
            math.asin(0.5),
            math.asin(0.9),
            math.pi - math.asin(0.9),
            math.pi - math.asin(0.5),
        ]
        torch.testing.assert_close(
            torch.tensor(result.t_events, dtype=torch.float64),
            torch.tensor(expected, dtype=torch.float64),
            rtol=0.0,
            atol=1e-9,
        )
        assert [e.increasing for e in result.events] == [True, False, True, False]

    def test_or_combination(self):
        """sin(t) > 0.9 or sin(t) < -0.9 on [0, 2 pi]."""
        extremes = _fast(
            or_(ThresholdDetector(0, 0.9), not_(ThresholdDetector(0, -0.9)))
        )

        result = find_events(extremes, sine, (0.0, 2 * math.pi))

        assert len(result.events) == 4

    def test_uses_reconciled_max_check(self):
        """A coarse operand does not make the combination miss a short window."""
        coarse = ThresholdDetector(0, -2.0, max_check_interval=10.0, threshold=1e-9)
        fine = ThresholdDetector(0, 0.99, max_check_interval=0.01, threshold=1e-9)

        result = find_events(and_(coarse, fine), sine, (0.0, math.pi))

        assert len(result.events) == 2

    def test_stop(self):
        detector = _fast(ThresholdDetector(0, 0.5)).with_handler(StopOnDecreasing())

        result = find_events(detector, sine, (0.0, 2 * math.pi))

        assert result.terminated
        assert [e.action for e in result.events] == [Action.CONTINUE, Action.STOP]
        assert abs(result.t_final - 5 * math.pi / 6) <= 1e-9
        assert result.state_final is result.events[-1].state

    def test_reset_state(self):
        reset = State(t=-1.0, y=torch.tensor([42.0], dtype=torch.float64))

        class Reset(ContinueOnEvent):
            def event_occurred(self, state, detector, increasing):
                return Action.RESET_STATE

            def reset_state(self, detector, old_state):
                return reset

        detector = _fast(ThresholdDetector(0, 0.5)).with_handler(Reset())

        result = find_events(detector, sine, (0.0, 1.0))

        assert len(result.events) == 1
        assert result.events[0].action is Action.RESET_STATE
        assert result.events[0].state is reset

    def test_init_called_once_before_g(self):
        log = []

        def g(state):
            log.append("g")
            return state.t - 0.5

        detector = FunctionDetector(
            g,
            init_function=lambda state, t: log.append(("init", state.t, t)),
            max_check_interval=0.1,
            threshold=1e-6,
        )

        find_events(detector, sine, (0.0, 1.0))

        assert log[0] == ("init", 0.0, 1.0)
        assert log.count(("init", 0.0, 1.0)) == 1
        assert "g" in log[1:]

    def test_no_events(self):
        detector = _fast(ThresholdDetector(0, 2.0))

        result = find_events(detector, sine, (0.0, 2 * math.pi))

        assert result.events == []
        assert result.t_final == 2 * math.pi

    def test_empty_span(self):
        result = find_events(ThresholdDetector(0, 0.5), sine, (1.0, 1.0))

        assert result.events == []
        assert result.t_final == 1.0

    def test_touch_and_return_is_not_an_event(self):
        """g reaching zero at a sample and turning back never crosses."""
        detector = FunctionDetector(
            lambda state: -abs(state.t - 1.0),
            max_check_interval=0.5,
            threshold=1e-9,
        )

        result = find_events(detector, sine, (0.0, 2.0))

        assert result.events == []

    def test_crossing_through_zero_sample(self):
        """A crossing landing exactly on a sample is reported once."""
        detector = FunctionDetector(
            lambda state: state.t - 1.0,
            max_check_interval=0.5,
            threshold=1e-9,
        )

        result = find_events(detector, sine, (0.0, 2.0))

        assert len(result.events) == 1
        assert result.events[0].increasing
        assert abs(result.events[0].t - 1.0) <= 1e-9

    def test_step_below_time_resolution_raises(self):
        detector = FunctionDetector(lambda state: 1.0, max_check_interval=1e-8)

        with pytest.raises(ValueError, match="does not advance"):
            find_events(detector, sine, (1e9, 1e9 + 1.0))

    def test_reversed_span_raises(self):
        with pytest.raises(ValueError, match="t0 <= t1"):
            find_events(ThresholdDetector(0, 0.5), sine, (1.0, 0.0))

    def test_evaluation_error_propagates(self):
        class ModelError(Exception):
            pass

        def failing(state):
            if state.t > 0.3:
                raise ModelError("no ephemeris")
            return 1.0

        detector = or_(
            ThresholdDetector(0, 0.5), FunctionDetector(failing)
        ).with_max_check_interval(0.1)

        with pytest.raises(ModelError, match="no ephemeris"):
            find_events(detector, sine, (0.0, 1.0))
