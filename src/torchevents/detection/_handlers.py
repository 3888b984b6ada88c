"""Event handlers.

A handler is invoked by the event search once a root of a detector's g
function has been located. It decides which :class:`Action` the advancer
takes next.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from torchevents.detection._action import Action
from torchevents.detection._state import State

if TYPE_CHECKING:
    from torchevents.detection._detector import Detector


class EventHandler:
    """Base handler.

    Subclasses override :meth:`event_occurred`. :meth:`reset_state` is only
    consulted when ``event_occurred`` returns ``Action.RESET_STATE``.
    """

    def init(
        self, initial_state: State, target_time: float, detector: Detector
    ) -> None:
        pass

    def event_occurred(
        self, state: State, detector: Detector, increasing: bool
    ) -> Action:
        raise NotImplementedError

    def reset_state(self, detector: Detector, old_state: State) -> State:
        return old_state

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ContinueOnEvent(EventHandler):
    """Record the event and keep going."""

    def event_occurred(
        self, state: State, detector: Detector, increasing: bool
    ) -> Action:
        return Action.CONTINUE


class StopOnEvent(EventHandler):
    """Stop at every event."""

    def event_occurred(
        self, state: State, detector: Detector, increasing: bool
    ) -> Action:
        return Action.STOP


class StopOnIncreasing(EventHandler):
    """Stop when g crosses zero upwards, continue otherwise."""

    def event_occurred(
        self, state: State, detector: Detector, increasing: bool
    ) -> Action:
        return Action.STOP if increasing else Action.CONTINUE


class StopOnDecreasing(EventHandler):
    """Stop when g crosses zero downwards, continue otherwise."""

    def event_occurred(
        self, state: State, detector: Detector, increasing: bool
    ) -> Action:
        return Action.CONTINUE if increasing else Action.STOP
