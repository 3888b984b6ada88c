from __future__ import annotations

from typing import Any, Tuple

from torchevents.detection._detector import Detector
from torchevents.detection._handlers import EventHandler
from torchevents.detection._state import State


class NegateDetector(Detector):
    """Detector whose g function is the negation of another detector's.

    Build it with :func:`not_`. The search parameters of ``original`` are
    copied verbatim; its handler is not used.
    """

    def __init__(
        self,
        original: Detector,
        max_check_interval: float,
        threshold: float,
        max_iteration_count: int,
        handler: EventHandler = None,
    ):
        super().__init__(
            max_check_interval, threshold, max_iteration_count, handler
        )
        self._original = original

    @property
    def original(self) -> Detector:
        return self._original

    def g(self, state: State) -> float:
        return -self._original.g(state)

    def init(self, initial_state: State, target_time: float) -> None:
        super().init(initial_state, target_time)
        self._original.init(initial_state, target_time)

    def _create(
        self,
        max_check_interval: float,
        threshold: float,
        max_iteration_count: int,
        handler: EventHandler,
    ) -> NegateDetector:
        return NegateDetector(
            self._original,
            max_check_interval,
            threshold,
            max_iteration_count,
            handler,
        )

    def _fields(self) -> Tuple[Any, ...]:
        return (self._original,)

    def __repr__(self) -> str:
        return f"NegateDetector({self._original!r})"
