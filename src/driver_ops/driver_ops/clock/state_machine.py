from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ClockEvent, ClockState
from ..core.exceptions import ConflictError, NotFoundError
from .model import TimeInterval

_TARGET = {
    ClockEvent.CLOCK_IN: ClockState.CLOCKED_IN,
    ClockEvent.CLOCK_OUT: ClockState.CLOCKED_OUT,
}


@dataclass(frozen=True)
class Transition:
    source: ClockState
    event: ClockEvent
    target: ClockState

    @property
    def changed(self) -> bool:
        return self.source != self.target


def state_of(open_interval: Optional[TimeInterval]) -> ClockState:
    """Clock state of a driver/work-day, backed by its open interval (if any)."""
    return ClockState.CLOCKED_IN if open_interval is not None else ClockState.CLOCKED_OUT


class ClockStateMachine:
    """Two states (clocked_out, clocked_in), two events (clock_in, clock_out).

    A same-state event is a no-op in tolerant mode (inspection-driven) and
    an error in strict mode (manual pause/resume).
    """

    def transition(self, current: ClockState, event: ClockEvent, *, strict: bool = False) -> Transition:
        target = _TARGET[event]
        if current == target and strict:
            if event == ClockEvent.CLOCK_IN:
                raise ConflictError("An open time entry already exists")
            raise NotFoundError("No open time entry found to pause")
        return Transition(source=current, event=event, target=target)
