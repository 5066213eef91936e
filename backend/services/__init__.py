from .playlist_parser import FormatError, parse
from .track_store import TrackNotFoundError, TrackStore
from .live_window import render, render_vod

__all__ = ["FormatError", "parse", "TrackNotFoundError", "TrackStore", "render", "render_vod"]
