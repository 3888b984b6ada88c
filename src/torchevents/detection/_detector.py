"""Base class shared by every event detector."""

from __future__ import annotations

import abc
import math
import numbers
from typing import Any, Optional, Tuple, Union

import torch
from tensordict import TensorDict

from torchevents.detection._action import Action
from torchevents.detection._exceptions import InvalidDetectorParameter
from torchevents.detection._handlers import ContinueOnEvent, EventHandler
from torchevents.detection._state import State

DEFAULT_MAX_CHECK_INTERVAL = 600.0
DEFAULT_THRESHOLD = 1e-6
DEFAULT_MAX_ITERATION_COUNT = 100


def _to_scalar(value) -> float:
    """Convert a g function result to a Python float."""
    if isinstance(value, torch.Tensor):
        if value.numel() != 1:
            raise ValueError(
                f"g function must return a scalar, got shape {tuple(value.shape)}"
            )
        return value.item()
    return float(value)


def check_parameters(
    max_check_interval: float,
    threshold: float,
    max_iteration_count: int,
) -> Tuple[float, float, int]:
    """Validate search parameters.

    Returns
    -------
    tuple
        ``(max_check_interval, threshold, max_iteration_count)`` as
        ``(float, float, int)``.

    Raises
    ------
    InvalidDetectorParameter
        If a real parameter is not strictly positive and finite, or if the
        iteration count is not a positive integer.
    """
    for name, value in (
        ("max_check_interval", max_check_interval),
        ("threshold", threshold),
    ):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidDetectorParameter(
                f"{name} must be a real number, got {value!r}"
            )
        if not math.isfinite(value) or value <= 0:
            raise InvalidDetectorParameter(
                f"{name} must be strictly positive and finite, got {value}"
            )

    if isinstance(max_iteration_count, bool) or not isinstance(
        max_iteration_count, numbers.Integral
    ):
        raise InvalidDetectorParameter(
            f"max_iteration_count must be an integer, got {max_iteration_count!r}"
        )
    if max_iteration_count <= 0:
        raise InvalidDetectorParameter(
            f"max_iteration_count must be positive, got {max_iteration_count}"
        )

    return float(max_check_interval), float(threshold), int(max_iteration_count)


class Detector(abc.ABC):
    """
    Event detector: a signed indicator function with search parameters.

    The sign of :meth:`g` encodes a condition (positive means true). The
    trajectory advancer samples ``g`` at most ``max_check_interval`` apart,
    refines sign changes to within ``threshold`` using at most
    ``max_iteration_count`` iterations, and then asks ``handler`` what to do.

    Detectors are immutable. :meth:`rebuild` and the ``with_*`` builders
    return new instances.

    Parameters
    ----------
    max_check_interval : float
        Maximal time between two samples of ``g``.
    threshold : float
        Convergence threshold of the root search, in time units.
    max_iteration_count : int
        Upper bound on root refinement iterations.
    handler : EventHandler, optional
        Invoked once a root is located. Defaults to :class:`ContinueOnEvent`.
    """

    def __init__(
        self,
        max_check_interval: float = DEFAULT_MAX_CHECK_INTERVAL,
        threshold: float = DEFAULT_THRESHOLD,
        max_iteration_count: int = DEFAULT_MAX_ITERATION_COUNT,
        handler: Optional[EventHandler] = None,
    ):
        (
            self._max_check_interval,
            self._threshold,
            self._max_iteration_count,
        ) = check_parameters(max_check_interval, threshold, max_iteration_count)
        self._handler = ContinueOnEvent() if handler is None else handler

    @property
    def max_check_interval(self) -> float:
        return self._max_check_interval

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def max_iteration_count(self) -> int:
        return self._max_iteration_count

    @property
    def handler(self) -> EventHandler:
        return self._handler

    @abc.abstractmethod
    def g(self, state: State) -> float:
        """Evaluate the indicator at ``state``. Positive means true."""

    def init(self, initial_state: State, target_time: float) -> None:
        """Prepare for a search epoch running from ``initial_state`` to ``target_time``.

        Called once before the first :meth:`g` of every epoch. Subclasses that
        override it must call ``super().init``.
        """
        self._handler.init(initial_state, target_time, self)

    def evaluate(self, state: State) -> float:
        return self.g(state)

    def initialize(self, initial_state: State, target_time: float) -> None:
        self.init(initial_state, target_time)

    def event_occurred(self, state: State, increasing: bool) -> Action:
        return self._handler.event_occurred(state, self, increasing)

    def rebuild(
        self,
        max_check_interval: float,
        threshold: float,
        max_iteration_count: int,
        handler: EventHandler,
    ) -> Detector:
        """Return a copy with new search parameters and handler.

        The values are taken verbatim; the receiver is left untouched.
        """
        max_check_interval, threshold, max_iteration_count = check_parameters(
            max_check_interval, threshold, max_iteration_count
        )
        return self._create(
            max_check_interval, threshold, max_iteration_count, handler
        )

    @abc.abstractmethod
    def _create(
        self,
        max_check_interval: float,
        threshold: float,
        max_iteration_count: int,
        handler: EventHandler,
    ) -> Detector:
        """Build a new instance of the concrete class with these parameters."""

    def with_max_check_interval(self, max_check_interval: float) -> Detector:
        return self.rebuild(
            max_check_interval,
            self._threshold,
            self._max_iteration_count,
            self._handler,
        )

    def with_threshold(self, threshold: float) -> Detector:
        return self.rebuild(
            self._max_check_interval,
            threshold,
            self._max_iteration_count,
            self._handler,
        )

    def with_max_iteration_count(self, max_iteration_count: int) -> Detector:
        return self.rebuild(
            self._max_check_interval,
            self._threshold,
            max_iteration_count,
            self._handler,
        )

    def with_handler(self, handler: EventHandler) -> Detector:
        return self.rebuild(
            self._max_check_interval,
            self._threshold,
            self._max_iteration_count,
            handler,
        )

    def __call__(
        self,
        t: Union[float, torch.Tensor],
        y: Union[torch.Tensor, TensorDict],
    ) -> float:
        """Evaluate as a plain ``g(t, y)`` event function."""
        return self.g(State(t=_to_scalar(t), y=y))

    def __and__(self, other: Detector):
        from torchevents.detection._boolean_detector import and_

        if not isinstance(other, Detector):
            return NotImplemented
        return and_(self, other)

    def __or__(self, other: Detector):
        from torchevents.detection._boolean_detector import or_

        if not isinstance(other, Detector):
            return NotImplemented
        return or_(self, other)

    def __invert__(self):
        from torchevents.detection._boolean_detector import not_

        return not_(self)

    def _fields(self) -> Tuple[Any, ...]:
        """Fields, besides the search parameters, that define equality."""
        return ()

    def _key(self) -> Tuple[Any, ...]:
        return (
            type(self),
            self._max_check_interval,
            self._threshold,
            self._max_iteration_count,
            self._handler,
            self._fields(),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Detector):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"max_check_interval={self._max_check_interval}, "
            f"threshold={self._threshold}, "
            f"max_iteration_count={self._max_iteration_count})"
        )
