from pydantic import BaseModel


class SegmentEntry(BaseModel):
    duration: float  # seconds, from #EXTINF
    title: str | None = None
    raw_lines: list[str]  # EXTINF line first, then tags/URI up to the next EXTINF


class Playlist(BaseModel):
    header: list[str]
    segments: list[SegmentEntry]

    @property
    def total_duration(self) -> float:
        return sum(segment.duration for segment in self.segments)


class TrackState(BaseModel):
    track_id: str
    start_time: float  # Unix timestamp, origin of the live window
    stop_time: float | None = None
    pending_timeouts: int = 0
    pending_errors: int = 0
    header: list[str]
    segments: list[SegmentEntry]

    @property
    def stopped(self) -> bool:
        return self.stop_time is not None


class ActionResponse(BaseModel):
    track_id: str
    known: bool
    applied: list[str]  # "stop", "timeout", "mp3error", "reset"
    message: str
    stopped: bool = False
    pending_timeouts: int = 0
    pending_errors: int = 0


class ErrorResponse(BaseModel):
    error: str
    code: str  # "NOT_FOUND", "UNKNOWN_TRACK", "INVALID_MANIFEST", "INJECTED_ERROR", etc.
    retry_after: int | None = None  # Seconds to wait before retry


class HealthResponse(BaseModel):
    status: str
    tracks: int
