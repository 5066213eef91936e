import logging
import math
import re

from models.schemas import Playlist, SegmentEntry

logger = logging.getLogger(__name__)

START_MARKER = "#EXTM3U"
END_MARKER = "#EXT-X-ENDLIST"

EXTINF_RE = re.compile(r"^#EXTINF:(?P<duration>[+-]?(\d*\.)?\d+),?(?P<title>.*)$")
LINE_SPLIT_RE = re.compile(r"\r?\n")


class FormatError(Exception):
    pass


def _parse_extinf(line: str) -> SegmentEntry | None:
    """Return a new segment for a valid EXTINF line, None otherwise."""
    match = EXTINF_RE.match(line)
    if not match:
        return None

    duration = float(match.group("duration"))
    if not math.isfinite(duration) or duration < 0:
        return None

    title = match.group("title").strip() or None
    return SegmentEntry(duration=duration, title=title, raw_lines=[line])


def parse(text: str) -> Playlist:
    """
    Parse a static m3u8 manifest into its header and segment entries.

    Malformed EXTINF lines are kept as ordinary lines rather than rejected.
    The end-of-list marker is dropped; it is re-added when a window is
    rendered for a stopped track.
    """
    lines = [line.strip() for line in LINE_SPLIT_RE.split(text.lstrip("\ufeff").strip())]
    if not lines or lines[0] != START_MARKER:
        raise FormatError("missing start marker")

    header: list[str] = []
    segments: list[SegmentEntry] = []
    current: SegmentEntry | None = None

    for line in lines:
        segment = _parse_extinf(line)
        if segment is not None:
            current = segment
            segments.append(segment)
        elif line == END_MARKER:
            continue
        elif current is None:
            header.append(line)
        else:
            current.raw_lines.append(line)

    if not segments:
        raise FormatError("manifest has no segments")

    playlist = Playlist(header=header, segments=segments)

    # A window made only of zero-length segments would never advance
    if playlist.total_duration <= 0:
        raise FormatError("manifest segments have no duration")

    logger.debug(
        "Parsed manifest: %d header lines, %d segments, %.3fs per cycle",
        len(header),
        len(segments),
        playlist.total_duration,
    )
    return playlist


def serialize(playlist: Playlist, ended: bool = True) -> str:
    """Rebuild manifest text from a parsed playlist."""
    lines = list(playlist.header)
    for segment in playlist.segments:
        lines.extend(segment.raw_lines)
    if ended:
        lines.append(END_MARKER)
    return "\n".join(lines) + "\n"
