import logging
from enum import Enum
from typing import Iterable, Mapping

from models.schemas import TrackState

logger = logging.getLogger(__name__)


class FaultAction(str, Enum):
    STOP = "stop"
    INJECT_TIMEOUT = "timeout"
    INJECT_ERROR = "mp3error"
    RESET = "reset"


class SegmentFault(str, Enum):
    NONE = "none"
    TIMEOUT = "timeout"
    ERROR = "error"


def actions_from_query(params: Mapping[str, str]) -> list[FaultAction]:
    """Collect the control flags set to "true", in declaration order. Unknown flags are ignored."""
    return [action for action in FaultAction if params.get(action.value) == "true"]


def apply(state: TrackState, action: FaultAction, now: float) -> None:
    """
    Mutate a track's fault state for one control action.

    STOP is idempotent: the first stop time is kept. Each injection adds one
    pending fault that the next matching request consumes. RESET is not a
    per-state mutation; the store handles it.
    """
    if action is FaultAction.STOP:
        if state.stop_time is None:
            state.stop_time = now
            logger.info("Track %s stopped", state.track_id)
    elif action is FaultAction.INJECT_TIMEOUT:
        state.pending_timeouts += 1
        logger.info("Track %s: %d pending timeouts", state.track_id, state.pending_timeouts)
    elif action is FaultAction.INJECT_ERROR:
        state.pending_errors += 1
        logger.info("Track %s: %d pending errors", state.track_id, state.pending_errors)


def apply_all(state: TrackState, actions: Iterable[FaultAction], now: float) -> None:
    for action in actions:
        apply(state, action, now)


def consume_segment_fault(state: TrackState) -> SegmentFault:
    """Take the next pending fault for a segment request. Timeouts go first."""
    if state.pending_timeouts > 0:
        state.pending_timeouts -= 1
        return SegmentFault.TIMEOUT
    if state.pending_errors > 0:
        state.pending_errors -= 1
        return SegmentFault.ERROR
    return SegmentFault.NONE
