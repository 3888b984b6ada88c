import enum


class Action(enum.Enum):
    """What the trajectory advancer should do after an event fires."""

    CONTINUE = "continue"
    STOP = "stop"
    RESET_STATE = "reset_state"
    RESET_DERIVATIVES = "reset_derivatives"
