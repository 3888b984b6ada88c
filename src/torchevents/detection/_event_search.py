"""Event search along a dense trajectory.

The trajectory is given as an interpolant ``interp(t) -> y``. The detector's g
function is sampled every ``max_check_interval``. A sign change between two
samples is located by bisection to within ``threshold``, using at most
``max_iteration_count`` iterations. The detector's handler then decides
whether the search continues.
"""

import warnings
from dataclasses import dataclass, field
from typing import Callable, List, Tuple, Union

import torch
from tensordict import TensorDict

from torchevents.detection._action import Action
from torchevents.detection._detector import Detector
from torchevents.detection._state import State

Interpolant = Callable[[float], Union[torch.Tensor, TensorDict]]


@dataclass
class EventRecord:
    """A located event.

    Attributes
    ----------
    t : float
        Event time, on the far side of the sign change.
    state : State
        State at ``t``, after any reset requested by the handler.
    increasing : bool
        True if g went from negative to positive.
    action : Action
        What the handler decided.
    """

    t: float
    state: State
    increasing: bool
    action: Action


@dataclass
class EventSearchResult:
    """Outcome of :func:`find_events`.

    Attributes
    ----------
    events : list of EventRecord
        Events in chronological order.
    t_final : float
        Time the search ended: ``t_span[1]``, or the time of the stopping event.
    state_final : State
        State at ``t_final``.
    terminated : bool
        True if a handler returned ``Action.STOP``.
    """

    events: List[EventRecord] = field(default_factory=list)
    t_final: float = 0.0
    state_final: State = None
    terminated: bool = False

    @property
    def t_events(self) -> List[float]:
        return [event.t for event in self.events]


def sign_change(g0: float, g1: float) -> bool:
    """Whether g has opposite strict signs at two samples.

    A zero sample is not a crossing by itself: :func:`find_events` keeps the
    last nonzero sample as the start of the bracket, so g touching zero and
    turning back reports nothing.
    """
    return (g0 < 0 < g1) or (g0 > 0 > g1)


def locate_event(
    detector: Detector,
    interp: Interpolant,
    t0: float,
    g0: float,
    t1: float,
) -> Tuple[float, State]:
    """
    Locate the root of ``detector.g`` in ``(t0, t1]`` using bisection.

    ``g0`` is the nonzero value of g at ``t0``; g at ``t1`` must have the
    opposite sign or be zero.

    Returns
    -------
    t_event : float
        End of the final bracket, where g already has its new sign.
    state_event : State
        State at ``t_event``.
    """
    state1 = State(t=t1, y=interp(t1))
    converged = False

    for _ in range(detector.max_iteration_count):
        if t1 - t0 <= detector.threshold:
            converged = True
            break

        t_mid = (t0 + t1) / 2
        state_mid = State(t=t_mid, y=interp(t_mid))
        g_mid = detector.g(state_mid)

        if g_mid == 0:
            t1, state1 = t_mid, state_mid
            converged = True
            break

        if (g_mid > 0) == (g0 > 0):
            t0, g0 = t_mid, g_mid
        else:
            t1, state1 = t_mid, state_mid
    else:
        converged = t1 - t0 <= detector.threshold

    if not converged:
        warnings.warn(
            f"Event location did not reach threshold {detector.threshold} "
            f"within {detector.max_iteration_count} iterations; "
            f"final bracket width is {t1 - t0}.",
            RuntimeWarning,
            stacklevel=3,
        )

    return t1, state1


def find_events(
    detector: Detector,
    interp: Interpolant,
    t_span: Tuple[float, float],
) -> EventSearchResult:
    """
    Find the events of ``detector`` along a trajectory.

    Parameters
    ----------
    detector : Detector
        Detector to search with. Its ``init`` is called once, before any g
        evaluation.
    interp : callable
        Dense output ``interp(t) -> y`` valid on ``t_span``, e.g. the
        interpolant returned by an ODE solver.
    t_span : tuple of float
        ``(t0, t1)`` with ``t0 <= t1``.

    Returns
    -------
    EventSearchResult

    Raises
    ------
    ValueError
        If ``t1 < t0``, or if ``max_check_interval`` is too small to advance
        time at the magnitude of ``t_span``.

    Notes
    -----
    Errors raised by the detector's g function are not caught.

    Examples
    --------
    >>> import math, torch
    >>> interp = lambda t: torch.tensor([math.sin(t)])
    >>> above = ThresholdDetector(0, 0.5, max_check_interval=0.1, threshold=1e-9)
    >>> result = find_events(above, interp, (0.0, 2 * math.pi))
    >>> result.t_events  # [pi/6, 5 pi/6]
    """
    t0, t1 = float(t_span[0]), float(t_span[1])
    if t1 < t0:
        raise ValueError(
            f"t_span must satisfy t0 <= t1, got ({t0}, {t1})"
        )

    state_prev = State(t=t0, y=interp(t0))
    detector.init(state_prev, t1)
    # last sample where g was nonzero; zero samples do not restart the bracket
    t_ref, g_ref = t0, detector.g(state_prev)

    result = EventSearchResult(t_final=t0, state_final=state_prev)

    t_prev = t0
    while t_prev < t1:
        t_curr = min(t_prev + detector.max_check_interval, t1)
        if t_curr <= t_prev:
            raise ValueError(
                f"max_check_interval {detector.max_check_interval} does not "
                f"advance time beyond t = {t_prev} in floating point"
            )
        state_curr = State(t=t_curr, y=interp(t_curr))
        g_curr = detector.g(state_curr)

        if sign_change(g_ref, g_curr):
            t_event, state_event = locate_event(
                detector, interp, t_ref, g_ref, t_curr
            )
            increasing = g_curr > g_ref
            action = detector.event_occurred(state_event, increasing)
            if action is Action.RESET_STATE:
                state_event = detector.handler.reset_state(
                    detector, state_event
                )
            result.events.append(
                EventRecord(
                    t=t_event,
                    state=state_event,
                    increasing=increasing,
                    action=action,
                )
            )
            if action is Action.STOP:
                result.t_final = t_event
                result.state_final = state_event
                result.terminated = True
                return result

        if g_curr != 0:
            t_ref, g_ref = t_curr, g_curr
        t_prev = t_curr
        result.t_final = t_curr
        result.state_final = state_curr

    return result
