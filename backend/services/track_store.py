import logging
import time
from typing import Callable, Dict

from models.schemas import TrackState
from services.playlist_parser import parse

logger = logging.getLogger(__name__)


class TrackNotFoundError(Exception):
    pass


class TrackStore:
    """
    In-memory map of track id -> simulated live track.
    A track is created on its first manifest request and lives until
    process shutdown or an explicit reset. No eviction: the store only
    backs bounded test runs.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._tracks: Dict[str, TrackState] = {}

    def get_or_create(self, track_id: str, load_source: Callable[[], str]) -> TrackState:
        """Return the track's state, parsing its source manifest on first use."""
        state = self._tracks.get(track_id)
        if state is not None:
            return state

        playlist = parse(load_source())
        state = TrackState(
            track_id=track_id,
            start_time=self._clock(),
            header=playlist.header,
            segments=playlist.segments,
        )
        self._tracks[track_id] = state
        logger.info("Created track %s with %d segments", track_id, len(state.segments))
        return state

    def get(self, track_id: str) -> TrackState | None:
        return self._tracks.get(track_id)

    def require(self, track_id: str) -> TrackState:
        state = self._tracks.get(track_id)
        if state is None:
            raise TrackNotFoundError(f"Unknown track: {track_id}")
        return state

    def reset(self, track_id: str) -> bool:
        """Forget a track. Its next manifest request starts a fresh timeline."""
        removed = self._tracks.pop(track_id, None) is not None
        if removed:
            logger.info("Reset track %s", track_id)
        return removed

    def clear(self) -> None:
        self._tracks.clear()

    def now(self) -> float:
        return self._clock()

    def __contains__(self, track_id: str) -> bool:
        return track_id in self._tracks

    def __len__(self) -> int:
        return len(self._tracks)
