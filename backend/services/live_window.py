from itertools import cycle

from models.schemas import Playlist, TrackState
from services.playlist_parser import END_MARKER, serialize


def _join(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def render(state: TrackState, now: float, lookahead: float = 0.0) -> str:
    """
    Build the manifest a client should see at `now`.

    The source segments are replayed in order, wrapping around, until the
    replayed duration covers the time elapsed since the track started. A
    live track looks `lookahead` seconds ahead so the window always holds an
    upcoming segment; a stopped track is frozen at its stop time and gets an
    end marker.
    """
    if state.stop_time is not None:
        effective_now = state.stop_time
    else:
        effective_now = now + lookahead
    elapsed = effective_now - state.start_time

    lines = list(state.header)
    clock = 0.0
    if elapsed > 0:
        for segment in cycle(state.segments):
            lines.extend(segment.raw_lines)
            clock += segment.duration
            if clock >= elapsed:
                break

    if state.stop_time is not None:
        lines.append(END_MARKER)
    return _join(lines)


def render_vod(state: TrackState) -> str:
    """The whole source, once, as an already finished playlist."""
    return serialize(Playlist(header=state.header, segments=state.segments), ended=True)
