from dataclasses import dataclass
from typing import Union

import torch
from tensordict import TensorDict


@dataclass(frozen=True)
class State:
    """Snapshot of a trajectory at a single instant.

    Attributes
    ----------
    t : float
        Value of the independent variable (time).
    y : Tensor or TensorDict
        State at ``t``.
    """

    t: float
    y: Union[torch.Tensor, TensorDict]
