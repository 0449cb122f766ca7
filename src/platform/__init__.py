"""Platform module — game-agnostic ports for black-box game QA."""

from .actions import ActionPort, Direction, KeyFamily
from .lifecycle import (
    Control,
    ControlPort,
    LifecycleTimeoutError,
    SessionLifecycle,
    SessionState,
)
from .observation import Observation, ObservationPort

__all__ = [
    "ActionPort",
    "Control",
    "ControlPort",
    "Direction",
    "KeyFamily",
    "LifecycleTimeoutError",
    "Observation",
    "ObservationPort",
    "SessionLifecycle",
    "SessionState",
]
