# tests/torchevents/detection/test__negate_detector.py
import hypothesis
import torch

from torchevents.detection import (
    ContinueOnEvent,
    FunctionDetector,
    NegateDetector,
    State,
    StopOnIncreasing,
    ThresholdDetector,
    not_,
)
from torchevents.testing.strategies import constant_detectors

STATE = State(t=0.0, y=torch.tensor([0.0]))


class TestNegateDetector:
    """Tests for not_."""

    @hypothesis.given(constant_detectors())
    def test_negates(self, detector):
        assert not_(detector).g(STATE) == -detector.value

    @hypothesis.given(constant_detectors())
    def test_double_negation(self, detector):
        assert not_(not_(detector)).g(STATE) == detector.g(STATE)

    def test_parameters_inherited(self):
        original = ThresholdDetector(
            0,
            1.0,
            max_check_interval=7.0,
            threshold=1e-4,
            max_iteration_count=12,
            handler=StopOnIncreasing(),
        )

        negated = not_(original)

        assert isinstance(negated, NegateDetector)
        assert negated.original is original
        assert negated.max_check_interval == 7.0
        assert negated.threshold == 1e-4
        assert negated.max_iteration_count == 12
        assert isinstance(negated.handler, ContinueOnEvent)

    def test_init_forwards(self):
        calls = []
        original = FunctionDetector(
            lambda state: 1.0,
            init_function=lambda state, t: calls.append(t),
        )

        not_(original).init(STATE, 3.0)

        assert calls == [3.0]

    def test_rebuild_keeps_original(self):
        original = ThresholdDetector(0, 1.0)
        negated = not_(original)

        rebuilt = negated.with_max_check_interval(0.25)

        assert isinstance(rebuilt, NegateDetector)
        assert rebuilt.original is original
        assert rebuilt.max_check_interval == 0.25
        assert negated.max_check_interval == original.max_check_interval
        assert rebuilt.g(State(t=0.0, y=torch.tensor([3.0]))) == -2.0
