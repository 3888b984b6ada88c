from __future__ import annotations

from typing import Any, Callable, Optional, Tuple, Union

import torch

from torchevents.detection._detector import (
    DEFAULT_MAX_CHECK_INTERVAL,
    DEFAULT_MAX_ITERATION_COUNT,
    DEFAULT_THRESHOLD,
    Detector,
    _to_scalar,
)
from torchevents.detection._handlers import EventHandler
from torchevents.detection._state import State


class FunctionDetector(Detector):
    """
    Detector backed by an arbitrary indicator callable.

    Parameters
    ----------
    function : callable
        ``function(state) -> float or Tensor`` with a single element. Its sign
        is the condition being tracked.
    init_function : callable, optional
        ``init_function(initial_state, target_time)``, run by :meth:`init`
        to reset any per-epoch cache held by ``function``.
    max_check_interval, threshold, max_iteration_count, handler
        See :class:`Detector`.

    Examples
    --------
    >>> above_x = FunctionDetector(lambda s: s.y[0] - 1.0, max_check_interval=0.1)
    """

    def __init__(
        self,
        function: Callable[[State], Union[float, torch.Tensor]],
        init_function: Optional[Callable[[State, float], None]] = None,
        max_check_interval: float = DEFAULT_MAX_CHECK_INTERVAL,
        threshold: float = DEFAULT_THRESHOLD,
        max_iteration_count: int = DEFAULT_MAX_ITERATION_COUNT,
        handler: Optional[EventHandler] = None,
    ):
        super().__init__(
            max_check_interval, threshold, max_iteration_count, handler
        )
        self._function = function
        self._init_function = init_function

    @property
    def function(self) -> Callable[[State], Union[float, torch.Tensor]]:
        return self._function

    def g(self, state: State) -> float:
        return _to_scalar(self._function(state))

    def init(self, initial_state: State, target_time: float) -> None:
        super().init(initial_state, target_time)
        if self._init_function is not None:
            self._init_function(initial_state, target_time)

    def _create(
        self,
        max_check_interval: float,
        threshold: float,
        max_iteration_count: int,
        handler: EventHandler,
    ) -> FunctionDetector:
        return FunctionDetector(
            self._function,
            self._init_function,
            max_check_interval,
            threshold,
            max_iteration_count,
            handler,
        )

    def _fields(self) -> Tuple[Any, ...]:
        return (self._function, self._init_function)


class ThresholdDetector(Detector):
    """
    Detector for one state component crossing a fixed value.

    ``g(state) = state.y[index] - value``, positive while the component is
    above ``value``.

    Parameters
    ----------
    index : int or str
        Position in a tensor state, or key in a TensorDict state. A TensorDict
        entry must hold a single element.
    value : float
        Level being crossed.
    max_check_interval, threshold, max_iteration_count, handler
        See :class:`Detector`.
    """

    def __init__(
        self,
        index: Union[int, str],
        value: float,
        max_check_interval: float = DEFAULT_MAX_CHECK_INTERVAL,
        threshold: float = DEFAULT_THRESHOLD,
        max_iteration_count: int = DEFAULT_MAX_ITERATION_COUNT,
        handler: Optional[EventHandler] = None,
    ):
        super().__init__(
            max_check_interval, threshold, max_iteration_count, handler
        )
        self._index = index
        self._value = float(value)

    @property
    def index(self) -> Union[int, str]:
        return self._index

    @property
    def value(self) -> float:
        return self._value

    def g(self, state: State) -> float:
        return _to_scalar(state.y[self._index]) - self._value

    def _create(
        self,
        max_check_interval: float,
        threshold: float,
        max_iteration_count: int,
        handler: EventHandler,
    ) -> ThresholdDetector:
        return ThresholdDetector(
            self._index,
            self._value,
            max_check_interval,
            threshold,
            max_iteration_count,
            handler,
        )

    def _fields(self) -> Tuple[Any, ...]:
        return (self._index, self._value)

    def __repr__(self) -> str:
        return (
            f"ThresholdDetector(index={self._index!r}, value={self._value}, "
            f"max_check_interval={self.max_check_interval}, "
            f"threshold={self.threshold}, "
            f"max_iteration_count={self.max_iteration_count})"
        )
