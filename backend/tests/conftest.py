import pytest

from models.schemas import SegmentEntry, TrackState

SOURCE_MANIFEST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-TARGETDURATION:5
#EXTINF:2.0,Intro
seg0.mp3
#EXTINF:3.0,
seg1.mp3
#EXTINF:5.0
seg2.mp3
#EXT-X-ENDLIST
"""


def make_state(durations, start_time=1000.0, header=None):
    segments = [
        SegmentEntry(duration=d, raw_lines=[f"#EXTINF:{d},", f"seg{i}.mp3"])
        for i, d in enumerate(durations)
    ]
    return TrackState(
        track_id="t",
        start_time=start_time,
        header=header if header is not None else ["#EXTM3U"],
        segments=segments,
    )


def segment_count(manifest):
    return sum(1 for line in manifest.splitlines() if line.startswith("#EXTINF:"))


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def state_factory():
    return make_state


@pytest.fixture
def source_manifest():
    return SOURCE_MANIFEST


@pytest.fixture
def count_segments():
    return segment_count
