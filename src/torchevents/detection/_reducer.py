import enum
import math
from typing import Callable, Dict


class Reducer(enum.Enum):
    """Binary operation folding operand g values into a composite g value.

    ``MIN`` gives logical AND, ``MAX`` gives logical OR.
    """

    MIN = "min"
    MAX = "max"

    def __call__(self, a: float, b: float) -> float:
        return _REDUCERS[self](a, b)


def _minimum(a: float, b: float) -> float:
    # NaN in either operand poisons the result; -0.0 orders below 0.0
    if math.isnan(a) or math.isnan(b):
        return math.nan
    if a == b:
        return a if math.copysign(1.0, a) < 0 else b
    return a if a < b else b


def _maximum(a: float, b: float) -> float:
    if math.isnan(a) or math.isnan(b):
        return math.nan
    if a == b:
        return b if math.copysign(1.0, a) < 0 else a
    return a if a > b else b


_REDUCERS: Dict[Reducer, Callable[[float, float], float]] = {
    Reducer.MIN: _minimum,
    Reducer.MAX: _maximum,
}
