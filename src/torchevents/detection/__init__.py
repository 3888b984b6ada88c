"""
Composable event detectors.

An event detector wraps a g function: a signed scalar of the trajectory state
whose sign encodes a condition (positive means true). A trajectory advancer
samples g, locates the instants where it changes sign and asks the detector's
handler what to do next. Boolean combinations of detectors are detectors too,
so the advancer cannot tell a composite from an atomic one.

Detectors
---------
Detector
    Abstract base. Holds the search parameters (max check interval,
    threshold, max iteration count) and the handler.

FunctionDetector
    Atomic detector backed by any ``g(state)`` callable.

ThresholdDetector
    Atomic detector for one state component crossing a level.

BooleanDetector
    Minimum (AND) or maximum (OR) of several detectors.

NegateDetector
    Sign-flipped detector.

Composition
-----------
and_
    Logical AND. Search parameters are the minimum over the operands.

or_
    Logical OR. Search parameters are the minimum over the operands.

not_
    Logical NOT. Search parameters are inherited unchanged.

Handlers
--------
ContinueOnEvent
    Default handler; never stops.

StopOnEvent, StopOnIncreasing, StopOnDecreasing
    Stop on every event, on rising crossings, or on falling crossings.

Search
------
find_events
    Sample a detector along an interpolated trajectory and locate its events.

Exceptions
----------
DetectorError
    Base exception for detector errors.

EmptyOperandSet
    Raised when ``and_`` or ``or_`` receive no operand.

InvalidDetectorParameter
    Raised when a search parameter is not strictly positive and finite.

Examples
--------
>>> import torch
>>> from torchevents.detection import State, ThresholdDetector, and_, not_
>>> above_low = ThresholdDetector(0, 1.0, max_check_interval=5.0, threshold=1e-3)
>>> above_high = ThresholdDetector(0, 3.0, max_check_interval=10.0, threshold=1e-6)
>>> in_band = and_(above_low, not_(above_high))
>>> in_band.g(State(t=0.0, y=torch.tensor([2.0])))
1.0
>>> in_band.max_check_interval, in_band.threshold
(5.0, 1e-06)

The operators ``&``, ``|`` and ``~`` build the same detectors:

>>> in_band = above_low & ~above_high
"""

from torchevents.detection._action import Action
from torchevents.detection._boolean_detector import (
    BooleanDetector,
    and_,
    combine,
    not_,
    or_,
)
from torchevents.detection._detector import (
    DEFAULT_MAX_CHECK_INTERVAL,
    DEFAULT_MAX_ITERATION_COUNT,
    DEFAULT_THRESHOLD,
    Detector,
    check_parameters,
)
from torchevents.detection._event_search import (
    EventRecord,
    EventSearchResult,
    find_events,
    locate_event,
    sign_change,
)
from torchevents.detection._exceptions import (
    DetectorError,
    EmptyOperandSet,
    InvalidDetectorParameter,
)
from torchevents.detection._function_detector import (
    FunctionDetector,
    ThresholdDetector,
)
from torchevents.detection._handlers import (
    ContinueOnEvent,
    EventHandler,
    StopOnDecreasing,
    StopOnEvent,
    StopOnIncreasing,
)
from torchevents.detection._negate_detector import NegateDetector
from torchevents.detection._reducer import Reducer
from torchevents.detection._state import State

__all__ = [
    # Exceptions
    "DetectorError",
    "EmptyOperandSet",
    "InvalidDetectorParameter",
    # State and actions
    "Action",
    "State",
    # Detectors
    "Detector",
    "FunctionDetector",
    "ThresholdDetector",
    "BooleanDetector",
    "NegateDetector",
    "Reducer",
    # Composition
    "and_",
    "or_",
    "not_",
    "combine",
    # Handlers
    "EventHandler",
    "ContinueOnEvent",
    "StopOnEvent",
    "StopOnIncreasing",
    "StopOnDecreasing",
    # Search
    "EventRecord",
    "EventSearchResult",
    "find_events",
    "locate_event",
    "sign_change",
    # Parameters
    "DEFAULT_MAX_CHECK_INTERVAL",
    "DEFAULT_MAX_ITERATION_COUNT",
    "DEFAULT_THRESHOLD",
    "check_parameters",
]
