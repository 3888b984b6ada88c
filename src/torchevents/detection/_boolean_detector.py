"""Logical AND, OR and NOT of event detectors.

Positive g values are read as true and negative ones as false. AND takes the
minimum of the operand g values, OR the maximum, NOT flips the sign. This only
makes sense for detectors whose sign carries a meaning, e.g. inside or outside
a region (eclipse, elevation above a mask, latitude band). Detectors that
merely mark an instant, such as a date, give surprising results.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence, Tuple, Union

from torchevents.detection._detector import Detector
from torchevents.detection._exceptions import EmptyOperandSet
from torchevents.detection._handlers import EventHandler
from torchevents.detection._negate_detector import NegateDetector
from torchevents.detection._reducer import Reducer
from torchevents.detection._state import State


class BooleanDetector(Detector):
    """
    Reduction of several detectors through :class:`Reducer`.

    Build it with :func:`and_` or :func:`or_` rather than directly.

    Parameters
    ----------
    detectors : sequence of Detector
        The operands. Stored as a tuple, in order.
    reducer : Reducer
        ``Reducer.MIN`` for AND, ``Reducer.MAX`` for OR.
    max_check_interval, threshold, max_iteration_count, handler
        See :class:`Detector`.
    """

    def __init__(
        self,
        detectors: Sequence[Detector],
        reducer: Reducer,
        max_check_interval: float,
        threshold: float,
        max_iteration_count: int,
        handler: EventHandler = None,
    ):
        super().__init__(
            max_check_interval, threshold, max_iteration_count, handler
        )
        self._reducer = Reducer(reducer)
        self._detectors = _check_operands(detectors, self._reducer)

    @property
    def detectors(self) -> Tuple[Detector, ...]:
        return self._detectors

    @property
    def reducer(self) -> Reducer:
        return self._reducer

    def g(self, state: State) -> float:
        # Every operand is evaluated, in order, even once the sign is settled:
        # the magnitude of the result stays continuous for the root search.
        # An exception from an operand stops the fold and propagates.
        result = None
        for detector in self._detectors:
            value = detector.g(state)
            result = value if result is None else self._reducer(result, value)
        return result

    def init(self, initial_state: State, target_time: float) -> None:
        super().init(initial_state, target_time)
        for detector in self._detectors:
            detector.init(initial_state, target_time)

    def _create(
        self,
        max_check_interval: float,
        threshold: float,
        max_iteration_count: int,
        handler: EventHandler,
    ) -> BooleanDetector:
        return BooleanDetector(
            self._detectors,
            self._reducer,
            max_check_interval,
            threshold,
            max_iteration_count,
            handler,
        )

    def _fields(self) -> Tuple[Any, ...]:
        return (self._detectors, self._reducer)

    def __repr__(self) -> str:
        name = "and_" if self._reducer is Reducer.MIN else "or_"
        operands = ", ".join(repr(d) for d in self._detectors)
        return f"{name}({operands})"


def _check_operands(
    detectors: Iterable[Detector], reducer: Reducer
) -> Tuple[Detector, ...]:
    operands = tuple(detectors)
    if not operands:
        raise EmptyOperandSet(
            f"{Reducer(reducer).name} combination needs at least one detector"
        )
    for operand in operands:
        if not isinstance(operand, Detector):
            raise TypeError(
                f"operands must be Detector instances, got {type(operand).__name__}"
            )
    return operands


def _collect(
    detectors: Tuple[Union[Detector, Iterable[Detector]], ...],
) -> Tuple[Detector, ...]:
    """Accept either ``f(d1, d2, ...)`` or ``f([d1, d2, ...])``."""
    if len(detectors) == 1 and not isinstance(detectors[0], Detector):
        detectors = detectors[0]
    return tuple(detectors)


def combine(detectors: Iterable[Detector], reducer: Reducer) -> BooleanDetector:
    """
    Combine ``detectors`` with ``reducer``.

    The operands are copied, so later changes to ``detectors`` have no effect.
    The search parameters are the minimum of the operands' parameters. The
    operands' handlers are not used; the result has the default
    :class:`ContinueOnEvent` handler.

    Raises
    ------
    EmptyOperandSet
        If ``detectors`` is empty.
    TypeError
        If an operand is not a :class:`Detector`.
    """
    operands = _check_operands(detectors, reducer)

    return BooleanDetector(
        operands,
        reducer,
        min(d.max_check_interval for d in operands),
        min(d.threshold for d in operands),
        min(d.max_iteration_count for d in operands),
    )


def and_(*detectors: Union[Detector, Iterable[Detector]]) -> BooleanDetector:
    """
    Logical AND of detectors.

    The result's g function is positive if and only if every operand's g
    function is positive.

    Parameters
    ----------
    *detectors : Detector or iterable of Detector
        Either the operands themselves or a single iterable of them. At least
        one operand is required.

    Returns
    -------
    BooleanDetector

    Raises
    ------
    EmptyOperandSet
        If no operand is given.

    Examples
    --------
    >>> overhead_and_sunlit = and_(elevation, sun_elevation)
    >>> overhead_and_sunlit = and_([elevation, sun_elevation])
    """
    return combine(_collect(detectors), Reducer.MIN)


def or_(*detectors: Union[Detector, Iterable[Detector]]) -> BooleanDetector:
    """
    Logical OR of detectors.

    The result's g function is positive if and only if at least one operand's
    g function is positive. Accepts the same arguments as :func:`and_`.

    Raises
    ------
    EmptyOperandSet
        If no operand is given.
    """
    return combine(_collect(detectors), Reducer.MAX)


def not_(detector: Detector) -> NegateDetector:
    """Negation of ``detector``: same magnitude, opposite sign.

    The search parameters of ``detector`` are kept; its handler is replaced by
    :class:`ContinueOnEvent`.
    """
    if not isinstance(detector, Detector):
        raise TypeError(
            f"expected a Detector, got {type(detector).__name__}"
        )
    return NegateDetector(
        detector,
        detector.max_check_interval,
        detector.threshold,
        detector.max_iteration_count,
    )
